"""Exact diagonalisation of the open spin-1/2 Heisenberg chain.

Used to validate DMRG energies on chains small enough to hold the full
``2**L``-dimensional Hamiltonian in memory.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from blockdmrg.contraction.contractor import kron
from blockdmrg.core.operators import spin_half_ops


def heisenberg_matrix(L: int, jz: float = 1.0, jxy: float = 1.0) -> jax.Array:
    """Build the L-site Heisenberg Hamiltonian (OBC) from Kronecker products.

    H = Jz * sum_i Sz_i Sz_{i+1} + Jxy/2 * sum_i (S+_i S-_{i+1} + S-_i S+_{i+1})

    Returns:
        Dense ``(2**L, 2**L)`` matrix.
    """
    if L < 2:
        raise ValueError(f"chain needs at least 2 sites, got {L}")
    ops = spin_half_ops()

    def kron_product(factors: list[jax.Array]) -> jax.Array:
        result = factors[0]
        for op in factors[1:]:
            result = kron(result, op)
        return result

    dim = 2**L
    H = jnp.zeros((dim, dim))
    for i in range(L - 1):
        for a, b, coeff in (
            ("Sz", "Sz", jz),
            ("Sp", "Sm", jxy / 2),
            ("Sm", "Sp", jxy / 2),
        ):
            factors = [ops["Id"]] * L
            factors[i] = ops[a]
            factors[i + 1] = ops[b]
            H = H + coeff * kron_product(factors)
    return H


def exact_ground_state_energy(L: int, jz: float = 1.0, jxy: float = 1.0) -> float:
    """Total ground-state energy of the L-site open chain."""
    return float(jnp.linalg.eigvalsh(heisenberg_matrix(L, jz, jxy))[0])
