import math

import pytest

from mcsim.decay.chain import (
    DecayChain,
    DecayMode,
    DecayNuclide,
    ReactionChannel,
    ReactionTarget,
    YieldTable,
)


def _pure_decay_chain() -> DecayChain:
    chain = DecayChain()
    a = DecayNuclide("A", half_life=1.0)
    a.decay_modes.append(DecayMode("beta-", ReactionTarget("B"), 1.0))
    chain.push(a)
    b = DecayNuclide("B", half_life=2.0)
    b.decay_modes.append(DecayMode("beta-", ReactionTarget("C"), 1.0))
    chain.push(b)
    chain.push(DecayNuclide("C"))
    return chain


def test_decay_constant_for_stable_is_zero():
    assert DecayNuclide("Fe56").decay_constant() == 0.0


def test_decay_constant_matches_half_life():
    n = DecayNuclide("Co60", half_life=1.663e8)
    assert abs(n.decay_constant() - math.log(2.0) / 1.663e8) < 1e-20


def test_matrix_balances_for_pure_decay_chain():
    chain = _pure_decay_chain()
    m = chain.build_transmutation_matrix(0.0, 0.0, lambda _i, _mt: 0.0)
    assert abs(m[:, 0].sum()) < 1e-15
    assert abs(m[:, 1].sum()) < 1e-15
    assert m[0, 0] == pytest.approx(-math.log(2.0))
    assert m[2, 1] == pytest.approx(math.log(2.0) / 2.0)


def test_push_and_index_of():
    chain = DecayChain()
    assert chain.push(DecayNuclide("X")) == 0
    assert chain.push(DecayNuclide("Y")) == 1
    assert chain.index_of("Y") == 1
    assert chain.index_of("Z") is None
    assert len(chain) == 2


def test_lost_target_only_removes_from_parent():
    chain = DecayChain()
    a = DecayNuclide("A", half_life=1.0)
    a.decay_modes.append(DecayMode("alpha", ReactionTarget.lost(), 1.0))
    chain.push(a)
    chain.push(DecayNuclide("B"))
    m = chain.build_transmutation_matrix(0.0, 0.0, lambda _i, _mt: 0.0)
    assert m[1, 0] == 0.0
    assert m[0, 0] == pytest.approx(-math.log(2.0))
    assert ReactionTarget.lost().is_lost


def test_capture_reaction_routes_to_child():
    chain = DecayChain()
    u = DecayNuclide("U235")
    u.reactions.append(ReactionChannel("(n,gamma)", ReactionTarget("U236")))
    chain.push(u)
    chain.push(DecayNuclide("U236"))
    m = chain.build_transmutation_matrix(
        1.0e14, 0.0253, lambda _i, mt: 99.0 if mt == "(n,gamma)" else 0.0
    )
    rate = 99.0 * 1.0e-24 * 1.0e14
    assert m[0, 0] == pytest.approx(-rate)
    assert m[1, 0] == pytest.approx(rate)


def test_nonpositive_cross_section_is_skipped():
    chain = DecayChain()
    u = DecayNuclide("U235")
    u.reactions.append(ReactionChannel("(n,gamma)", ReactionTarget("U236")))
    chain.push(u)
    chain.push(DecayNuclide("U236"))
    m = chain.build_transmutation_matrix(1.0e14, 0.0253, lambda _i, _mt: -5.0)
    assert not m.any()


def test_fission_routes_yields():
    chain = DecayChain()
    u = DecayNuclide("U235")
    u.reactions.append(ReactionChannel("fission", ReactionTarget.lost(), 1.93e8))
    u.fission_yields = {
        0.0253: YieldTable(["Cs137", "Sr90"], [0.062, 0.058]),
        500000.0: YieldTable(["Cs137", "Sr90"], [0.060, 0.055]),
    }
    chain.push(u)
    chain.push(DecayNuclide("Cs137"))
    chain.push(DecayNuclide("Sr90"))
    m = chain.build_transmutation_matrix(
        1.0e14, 0.0253, lambda _i, mt: 585.0 if mt == "fission" else 0.0
    )
    want = 585.0 * 1.0e-24 * 1.0e14 * 0.062
    assert m[1, 0] / want == pytest.approx(1.0, rel=1e-3)
    assert m[0, 0] == pytest.approx(-585.0 * 1.0e-24 * 1.0e14)


def test_yield_table_length_mismatch_raises():
    with pytest.raises(ValueError):
        YieldTable(["Cs137"], [0.1, 0.2])