r"""Dense tensor primitives and block / superblock assembly.

Index conventions::

    outer_product(a, b)[i, j, k, l] = a[i, k] * b[j, l]

        i, k: row / column of the LEFT factor  (bra, ket)
        j, l: row / column of the RIGHT factor (bra, ket)

    reduce_pairs(T)[(i, j), (k, l)] = T[i, j, k, l]

        row    (i, j) -> i * dim_j + j
        column (k, l) -> k * dim_l + l

so ``reduce_pairs(outer_product(a, b)) == kron(a, b)``. A superblock matrix
built this way acts on wavefunctions ``psi[i, j]`` flattened row-major, with
``i`` the left (system) index and ``j`` the right (environment) index.

Every four-index term is evaluated with opt_einsum on the JAX backend. Shapes
are checked before each contraction so a dimension mismatch raises
``ValueError`` instead of broadcasting silently.

The nearest-neighbour coupling between two edge spins is

    Jz * Sz_a Sz_b + Jxy / 2 * (S+_a S-_b + S-_a S+_b)
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import opt_einsum

from blockdmrg.core.block import Block
from blockdmrg.core.operators import identity, spin_half_ops

_OUTER_SUBSCRIPTS = "ik,jl->ijkl"


def _check_matrix(name: str, a: jax.Array, square: bool = True) -> None:
    if a.ndim != 2:
        raise ValueError(f"{name} must be a matrix, got shape {tuple(a.shape)}")
    if square and a.shape[0] != a.shape[1]:
        raise ValueError(f"{name} must be square, got shape {tuple(a.shape)}")


# ---------- Primitives ----------

def outer_product(a: jax.Array, b: jax.Array) -> jax.Array:
    """Four-index outer product ``T[i, j, k, l] = a[i, k] * b[j, l]``.

    Args:
        a: Left factor, shape ``(di, dk)``.
        b: Right factor, shape ``(dj, dl)``.

    Returns:
        Array of shape ``(di, dj, dk, dl)``.
    """
    _check_matrix("left factor", a, square=False)
    _check_matrix("right factor", b, square=False)
    return opt_einsum.contract(_OUTER_SUBSCRIPTS, a, b, backend="jax")


def reduce_pairs(tensor: jax.Array) -> jax.Array:
    """Merge index pairs ``(i, j)`` and ``(k, l)`` of a four-index tensor.

    Returns:
        Matrix of shape ``(di * dj, dk * dl)``.
    """
    if tensor.ndim != 4:
        raise ValueError(
            f"reduce_pairs expects a 4-index tensor, got shape {tuple(tensor.shape)}"
        )
    di, dj, dk, dl = tensor.shape
    return tensor.reshape(di * dj, dk * dl)


def kron(a: jax.Array, b: jax.Array) -> jax.Array:
    """Kronecker product via ``reduce_pairs(outer_product(a, b))``."""
    return reduce_pairs(outer_product(a, b))


def transpose(a: jax.Array) -> jax.Array:
    _check_matrix("operand", a, square=False)
    return a.T


def transform_operator(op: jax.Array, truncation: jax.Array) -> jax.Array:
    """Rotate ``op`` into the retained basis: ``T @ op @ T^T``.

    Args:
        op:         Square operator, shape ``(dim, dim)``.
        truncation: Truncation matrix, shape ``(n_keep, dim)``; rows are the
                    retained basis vectors.

    Returns:
        Operator of shape ``(n_keep, n_keep)``.
    """
    _check_matrix("operator", op)
    _check_matrix("truncation matrix", truncation, square=False)
    if truncation.shape[1] != op.shape[0]:
        raise ValueError(
            f"truncation matrix {tuple(truncation.shape)} does not match "
            f"operator dimension {op.shape[0]}"
        )
    return truncation @ op @ transpose(truncation)


def rotate_block(block: Block, truncation: jax.Array) -> Block:
    """Rotate all four operators of ``block`` into the retained basis."""
    if truncation.ndim != 2 or truncation.shape[1] != block.dim:
        raise ValueError(
            f"truncation matrix {tuple(truncation.shape)} does not match "
            f"block dimension {block.dim}"
        )
    return jax.tree_util.tree_map(
        lambda op: transform_operator(op, truncation), block
    )


# ---------- Assembly ----------

def _coupling_terms(
    left: Block, right: Block, jz: float, jxy: float
) -> jax.Array:
    return (
        jz * outer_product(left.sz, right.sz)
        + 0.5 * jxy * outer_product(left.sp, right.sm)
        + 0.5 * jxy * outer_product(left.sm, right.sp)
    )


def superblock_tensor(
    left: Block,
    right: Block,
    jz: float = 1.0,
    jxy: float = 1.0,
) -> jax.Array:
    """Four-index superblock Hamiltonian of two blocks joined at their edges.

    ``H = H_L (x) 1_R + 1_L (x) H_R + coupling(edge_L, edge_R)``

    Returns:
        Array of shape ``(dL, dR, dL, dR)``.
    """
    id_l = identity(left.dim, left.hamiltonian.dtype)
    id_r = identity(right.dim, right.hamiltonian.dtype)
    return (
        outer_product(left.hamiltonian, id_r)
        + outer_product(id_l, right.hamiltonian)
        + _coupling_terms(left, right, jz, jxy)
    )


def superblock_hamiltonian(
    left: Block,
    right: Block,
    jz: float = 1.0,
    jxy: float = 1.0,
) -> jax.Array:
    """Superblock Hamiltonian as a ``(dL * dR) x (dL * dR)`` matrix."""
    return reduce_pairs(superblock_tensor(left, right, jz, jxy))


def add_site(
    block: Block,
    jz: float = 1.0,
    jxy: float = 1.0,
    expected_dim: int | None = None,
) -> Block:
    """Grow ``block`` by one spin attached to its edge.

    The new Hamiltonian is ``H (x) 1_2 + coupling(edge, new site)`` and the
    new edge operators act on the added spin: ``1_dim (x) S``.

    Args:
        block:        Block to grow.
        jz, jxy:      Couplings.
        expected_dim: If given, the dimension the grown block must have.

    Raises:
        ValueError: If the grown block does not have ``expected_dim`` states.
    """
    site = spin_half_ops(block.hamiltonian.dtype)
    site_block = Block(1, jnp.zeros_like(site["Sz"]), site["Sz"], site["Sp"], site["Sm"])
    id_b = identity(block.dim, block.hamiltonian.dtype)

    hamiltonian = reduce_pairs(
        outer_product(block.hamiltonian, site["Id"])
        + _coupling_terms(block, site_block, jz, jxy)
    )
    grown = Block(
        size=block.size + 1,
        hamiltonian=hamiltonian,
        sz=kron(id_b, site["Sz"]),
        sp=kron(id_b, site["Sp"]),
        sm=kron(id_b, site["Sm"]),
    )
    if expected_dim is not None and grown.dim != expected_dim:
        raise ValueError(
            f"grown block has {grown.dim} states, expected {expected_dim}"
        )
    return grown
