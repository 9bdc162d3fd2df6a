"""Single-site spin-1/2 operators and identity matrices.

Basis ordering: |up⟩, |down⟩ → indices 0, 1.
"""

from __future__ import annotations

from typing import Any

import jax
import jax.numpy as jnp

# Local Hilbert-space dimension of one spin-1/2 site.
SITE_DIM = 2


def spin_half_ops(dtype: Any = jnp.float64) -> dict[str, jax.Array]:
    """Standard spin-1/2 single-site operators (d=2).

    Returns a dict with keys "Sz", "Sp", "Sm", "Id".
    """
    return {
        "Sz": jnp.array([[0.5, 0.0], [0.0, -0.5]], dtype=dtype),
        "Sp": jnp.array([[0.0, 1.0], [0.0, 0.0]], dtype=dtype),  # S+ = |up><down|
        "Sm": jnp.array([[0.0, 0.0], [1.0, 0.0]], dtype=dtype),  # S- = |down><up|
        "Id": jnp.eye(SITE_DIM, dtype=dtype),
    }


def identity(n: int, dtype: Any = jnp.float64) -> jax.Array:
    """Return the ``n x n`` identity matrix.

    Raises:
        ValueError: If ``n`` is not positive.
    """
    if n < 1:
        raise ValueError(f"identity dimension must be positive, got {n}")
    return jnp.eye(n, dtype=dtype)
