"""Core value types: spin operators and blocks."""

from blockdmrg.core.block import OPERATOR_NAMES, Block, single_site_block
from blockdmrg.core.operators import SITE_DIM, identity, spin_half_ops

# General-purpose zero-guard for vector normalisation.
EPS = 1e-15

__all__ = [
    "Block",
    "OPERATOR_NAMES",
    "single_site_block",
    "SITE_DIM",
    "identity",
    "spin_half_ops",
    "EPS",
]
