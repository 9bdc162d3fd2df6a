"""Block: the effective Hamiltonian and edge spin operators of a sub-chain.

A Block stores four square matrices in one (truncated) basis:

- ``hamiltonian``: the block Hamiltonian restricted to the retained states,
- ``sz``, ``sp``, ``sm``: Sz, S+ and S- of the block's *edge* site, i.e. the
  site added last. The edge site is the one that couples to whatever sits
  next to the block in a superblock.

Blocks are immutable values. Growing or rotating a block returns a new one.

Block is registered as a JAX pytree so that one function can be mapped over
all four operators at once::

    rotated = jax.tree_util.tree_map(lambda op: T @ op @ T.T, block)

Pytree structure:
    Leaves:     (hamiltonian, sz, sp, sm)
    Aux data:   size (static, not traced by JAX)
"""

from __future__ import annotations

from typing import Any

import jax
import jax.numpy as jnp

from blockdmrg.core.operators import spin_half_ops

OPERATOR_NAMES = ("hamiltonian", "sz", "sp", "sm")


@jax.tree_util.register_pytree_node_class
class Block:
    """A contiguous sub-chain in a (possibly truncated) basis.

    Args:
        size:        Number of sites in the block.
        hamiltonian: Block Hamiltonian, shape ``(dim, dim)``.
        sz:          Edge-site Sz, shape ``(dim, dim)``.
        sp:          Edge-site S+, shape ``(dim, dim)``.
        sm:          Edge-site S-, shape ``(dim, dim)``.

    Raises:
        ValueError: If ``size`` is not positive or the operators are not
            square matrices of one common dimension.
    """

    def __init__(
        self,
        size: int,
        hamiltonian: jax.Array,
        sz: jax.Array,
        sp: jax.Array,
        sm: jax.Array,
    ) -> None:
        if size < 1:
            raise ValueError(f"Block size must be positive, got {size}")
        ops = (hamiltonian, sz, sp, sm)
        dim = hamiltonian.shape[0] if hamiltonian.ndim == 2 else -1
        for name, op in zip(OPERATOR_NAMES, ops):
            if op.ndim != 2 or op.shape != (dim, dim):
                raise ValueError(
                    f"Block operator {name!r} has shape {tuple(op.shape)}, "
                    f"expected ({dim}, {dim}) to match the Hamiltonian"
                )
        self._size = int(size)
        self._ops = ops

    # --- Pytree interface ---

    def tree_flatten(self) -> tuple[tuple[jax.Array, ...], int]:
        return self._ops, self._size

    @classmethod
    def tree_unflatten(cls, aux: int, children: tuple[jax.Array, ...]) -> Block:
        # JAX may unflatten with placeholder leaves; skip shape validation.
        obj = object.__new__(cls)
        obj._size = aux
        obj._ops = tuple(children)
        return obj

    # --- Accessors ---

    @property
    def size(self) -> int:
        return self._size

    @property
    def dim(self) -> int:
        """Number of retained basis states."""
        return int(self._ops[0].shape[0])

    @property
    def hamiltonian(self) -> jax.Array:
        return self._ops[0]

    @property
    def sz(self) -> jax.Array:
        return self._ops[1]

    @property
    def sp(self) -> jax.Array:
        return self._ops[2]

    @property
    def sm(self) -> jax.Array:
        return self._ops[3]

    def operators(self) -> dict[str, jax.Array]:
        """Return the four operators keyed by name."""
        return dict(zip(OPERATOR_NAMES, self._ops))

    def __repr__(self) -> str:
        return f"Block(size={self._size}, dim={self.dim})"


def single_site_block(dtype: Any = jnp.float64) -> Block:
    """Block of one spin: zero Hamiltonian, its own spin operators on the edge."""
    ops = spin_half_ops(dtype)
    return Block(
        size=1,
        hamiltonian=jnp.zeros_like(ops["Sz"]),
        sz=ops["Sz"],
        sp=ops["Sp"],
        sm=ops["Sm"],
    )
