"""Reduced density matrix and the truncation matrix built from it.

The ground-state vector of a superblock is reshaped to ``psi[i, j]`` with ``i``
the system index and ``j`` the environment index. Tracing out the environment
gives ``rho = psi @ psi^T``.

Retention rule: eigenvectors of ``rho`` are ranked by descending eigenvalue,
ties broken by the position ``eigh`` returned them in (stable sort), and the
first ``n_keep`` form the rows of the truncation matrix.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
import numpy as np


class Truncation(NamedTuple):
    """Truncation matrix and diagnostics.

    Attributes:
        matrix:           Shape ``(n_keep, dim)``; rows are retained states.
        weights:          Retained density-matrix eigenvalues, descending.
        truncation_error: Discarded weight, ``trace(rho) - sum(weights)``
                          (clipped at zero).
    """

    matrix: jax.Array
    weights: jax.Array
    truncation_error: float


def wavefunction_matrix(
    vector: jax.Array, system_dim: int, environment_dim: int
) -> jax.Array:
    """Reshape a flat superblock vector into ``psi[system, environment]``."""
    if vector.size != system_dim * environment_dim:
        raise ValueError(
            f"vector of length {vector.size} cannot be reshaped to "
            f"({system_dim}, {environment_dim})"
        )
    return vector.reshape(system_dim, environment_dim)


def reduced_density_matrix(psi: jax.Array) -> jax.Array:
    """Trace out the environment (second) index of ``psi``."""
    if psi.ndim != 2:
        raise ValueError(f"psi must be a matrix, got shape {tuple(psi.shape)}")
    return psi @ psi.T


def truncation_matrix(rho: jax.Array, n_keep: int) -> Truncation:
    """Keep the ``n_keep`` most heavily weighted eigenvectors of ``rho``.

    Raises:
        ValueError: If ``n_keep`` is not in ``1..dim``.
    """
    dim = rho.shape[0]
    if not 1 <= n_keep <= dim:
        raise ValueError(
            f"cannot keep {n_keep} states of a {dim}-dimensional density matrix"
        )
    eigvals, eigvecs = jnp.linalg.eigh(rho)
    order = np.argsort(-np.asarray(eigvals), kind="stable")[:n_keep]
    weights = eigvals[order]
    matrix = eigvecs[:, order].T
    discarded = float(jnp.trace(rho) - jnp.sum(weights))
    return Truncation(matrix, weights, max(discarded, 0.0))
