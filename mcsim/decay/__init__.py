"""Decay-chain data types, transmutation matrices and the chain.xml reader."""