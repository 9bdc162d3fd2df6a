"""Dense tensor primitives and superblock assembly."""

from blockdmrg.contraction.contractor import (
    add_site,
    kron,
    outer_product,
    reduce_pairs,
    rotate_block,
    superblock_hamiltonian,
    superblock_tensor,
    transform_operator,
    transpose,
)

__all__ = [
    "outer_product",
    "reduce_pairs",
    "kron",
    "transpose",
    "transform_operator",
    "rotate_block",
    "superblock_tensor",
    "superblock_hamiltonian",
    "add_site",
]
