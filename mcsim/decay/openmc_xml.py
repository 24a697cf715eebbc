"""Reader for depletion-chain XML files.

Handles ``<nuclide>`` entries with their ``<decay>`` and ``<reaction>``
children, and ``<neutron_fission_yields>`` blocks holding one
``<fission_yields energy="...">`` table per incident energy, each with
whitespace-separated ``<products>`` and parallel ``<data>``.
"""

from __future__ import annotations

import io
import os
import xml.etree.ElementTree as ET
from typing import IO, Union

from mcsim.decay.chain import (
    DecayChain,
    DecayMode,
    DecayNuclide,
    ReactionChannel,
    ReactionTarget,
    YieldTable,
)

_TEXT_TAGS = ("energies", "products", "data")

Source = Union[str, bytes, IO[str], IO[bytes]]


class ChainXmlError(Exception):
    """A chain file could not be read, was not XML, or broke the schema."""


def load_chain_xml(path: str | os.PathLike[str]) -> DecayChain:
    """Load a depletion chain from the file at ``path``."""
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise ChainXmlError(f"I/O error reading chain.xml: {exc}") from exc
    return parse_chain_xml(data)


def parse_chain_xml(source: Source) -> DecayChain:
    """Parse a depletion chain from XML text, bytes or an open file."""
    if isinstance(source, (str, bytes)):
        data = source
    else:
        try:
            data = source.read()
        except OSError as exc:
            raise ChainXmlError(f"I/O error reading chain.xml: {exc}") from exc

    parser = ET.XMLPullParser(events=("start", "end"))
    chain = DecayChain()
    current: DecayNuclide | None = None
    in_fy = False
    fy_energies: list[float] = []
    fy_tables: dict[float, YieldTable] = {}
    fy_energy: float | None = None
    fy_products: list[str] = []
    fy_data: list[float] = []
    text_target: str | None = None

    try:
        parser.feed(data)
        parser.close()
        events = list(parser.read_events())
    except ET.ParseError as exc:
        raise ChainXmlError(f"XML parse error in chain.xml: {exc}") from exc

    for event, elem in events:
        tag = elem.tag
        if event == "start":
            if tag == "nuclide":
                current = _start_nuclide(elem)
            elif tag == "decay":
                if current is not None:
                    current.decay_modes.append(_parse_decay(elem))
            elif tag == "reaction":
                if current is not None:
                    current.reactions.append(_parse_reaction(elem))
            elif tag == "neutron_fission_yields":
                in_fy = True
                fy_energies.clear()
                fy_tables.clear()
            elif tag == "fission_yields" and in_fy:
                fy_energy = _parse_f64(_require_attr(elem, "energy"))
                fy_products = []
                fy_data = []
            elif tag in _TEXT_TAGS and in_fy:
                text_target = tag
            continue

        if tag in _TEXT_TAGS:
            if text_target == tag:
                tokens = (elem.text or "").split()
                if tag == "energies":
                    fy_energies.extend(_parse_f64(tok) for tok in tokens)
                elif tag == "products":
                    fy_products.extend(tokens)
                else:
                    fy_data.extend(_parse_f64(tok) for tok in tokens)
            text_target = None
        elif tag == "nuclide":
            if current is not None:
                chain.push(current)
                current = None
        elif tag == "fission_yields" and in_fy:
            if fy_energy is not None:
                if len(fy_products) != len(fy_data):
                    raise ChainXmlError(
                        f"chain.xml schema error: fission_yields at {fy_energy} eV: "
                        f"products {len(fy_products)} != data {len(fy_data)}"
                    )
                fy_tables[fy_energy] = YieldTable(
                    products=fy_products, yields=fy_data
                )
                fy_products = []
                fy_data = []
                fy_energy = None
        elif tag == "neutron_fission_yields":
            in_fy = False
            if current is not None:
                current.fission_yields = dict(sorted(fy_tables.items()))
            fy_tables.clear()

    return chain


def _start_nuclide(elem: ET.Element) -> DecayNuclide:
    nuclide = DecayNuclide(_require_attr(elem, "name"))
    half_life = elem.get("half_life")
    if half_life is not None:
        nuclide.half_life = _parse_f64(half_life)
    decay_energy = elem.get("decay_energy")
    if decay_energy is not None:
        nuclide.decay_energy = _parse_f64(decay_energy)
    return nuclide


def _target(elem: ET.Element) -> ReactionTarget:
    name = elem.get("target")
    return ReactionTarget(name) if name is not None else ReactionTarget.lost()


def _optional_f64(elem: ET.Element, key: str, default: float) -> float:
    value = elem.get(key)
    return default if value is None else _parse_f64(value)


def _parse_decay(elem: ET.Element) -> DecayMode:
    return DecayMode(
        mode=_require_attr(elem, "type"),
        target=_target(elem),
        branching_ratio=_optional_f64(elem, "branching_ratio", 1.0),
    )


def _parse_reaction(elem: ET.Element) -> ReactionChannel:
    return ReactionChannel(
        mt=_require_attr(elem, "type"),
        target=_target(elem),
        q_value=_optional_f64(elem, "Q", 0.0),
        branching_ratio=_optional_f64(elem, "branching_ratio", 1.0),
    )


def _require_attr(elem: ET.Element, key: str) -> str:
    value = elem.get(key)
    if value is None:
        raise ChainXmlError(
            f"chain.xml schema error: <{elem.tag}>: missing required attribute '{key}'"
        )
    return value


def _parse_f64(text: str) -> float:
    stripped = text.strip()
    try:
        if "_" in stripped:
            raise ValueError("underscores are not allowed")
        return float(stripped)
    except ValueError as exc:
        raise ChainXmlError(
            f"chain.xml schema error: not a real number: '{text}' ({exc})"
        ) from exc


# Keeps the io import meaningful for callers passing text streams.
_TEXT_STREAM_TYPES = (io.StringIO, io.BytesIO)