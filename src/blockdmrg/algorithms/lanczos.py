"""Lanczos ground-state solver for dense real-symmetric matrices.

The superblock Hamiltonian is formed explicitly, so the solver takes the
matrix itself. Matrices up to ``dense_cutoff`` rows are diagonalised directly
with ``eigh``; larger ones go through Lanczos with full reorthogonalisation,
which keeps the Krylov basis orthonormal so no ghost eigenvalues appear.

The matrix-vector product is ``@jax.jit`` compiled and cached per shape.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from blockdmrg.core import EPS


@jax.jit
def _matvec(matrix: jax.Array, v: jax.Array) -> jax.Array:
    return matrix @ v


def _dense_ground_state(matrix: jax.Array) -> tuple[float, jax.Array]:
    eigvals, eigvecs = jnp.linalg.eigh(matrix)
    return float(eigvals[0]), eigvecs[:, 0]


def lanczos_ground_state(
    matrix: jax.Array,
    max_iter: int = 100,
    tol: float = 1e-12,
    dense_cutoff: int = 64,
    key: jax.Array | None = None,
) -> tuple[float, jax.Array]:
    """Lowest eigenvalue and normalised eigenvector of a symmetric matrix.

    Args:
        matrix:       Real-symmetric matrix, shape ``(n, n)``.
        max_iter:     Maximum Krylov dimension.
        tol:          Stop when the next Lanczos residual norm drops below this.
        dense_cutoff: Use dense ``eigh`` when ``n <= dense_cutoff``.
        key:          PRNG key for the random starting vector (default key 0).

    Returns:
        (eigenvalue, eigenvector) with the eigenvector of unit norm.

    Raises:
        ValueError: If ``matrix`` is not square.
    """
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(
            f"ground-state solver needs a square matrix, got {tuple(matrix.shape)}"
        )
    n = matrix.shape[0]
    if n <= dense_cutoff:
        return _dense_ground_state(matrix)

    if key is None:
        key = jax.random.PRNGKey(0)
    v0 = jax.random.normal(key, (n,), dtype=matrix.dtype)
    v = v0 / (jnp.linalg.norm(v0) + EPS)

    basis = [v]
    alphas: list[jax.Array] = []
    betas: list[jax.Array] = []

    for step in range(min(max_iter, n)):
        w = _matvec(matrix, basis[-1])
        alpha = jnp.dot(basis[-1], w)
        alphas.append(alpha)

        w = w - alpha * basis[-1]
        if step > 0:
            w = w - betas[-1] * basis[-2]

        # Full reorthogonalisation against the whole Krylov basis
        stacked = jnp.stack(basis, axis=0)
        w = w - stacked.T @ (stacked @ w)

        beta = jnp.linalg.norm(w)
        if float(beta) < tol:
            break
        betas.append(beta)
        basis.append(w / beta)

    k = len(alphas)
    if k == 1:
        return float(alphas[0]), basis[0]

    alphas_arr = jnp.stack(alphas)
    betas_arr = jnp.stack(betas[: k - 1])
    T = jnp.diag(alphas_arr) + jnp.diag(betas_arr, k=1) + jnp.diag(betas_arr, k=-1)

    eigvals, eigvecs = jnp.linalg.eigh(T)
    eigenvalue = float(eigvals[0])

    basis_stacked = jnp.stack(basis[:k], axis=0)  # (k, n)
    eigenvector = jnp.tensordot(eigvecs[:, 0], basis_stacked, axes=1)
    eigenvector = eigenvector / (jnp.linalg.norm(eigenvector) + EPS)

    return eigenvalue, eigenvector
