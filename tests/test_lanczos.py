"""Tests for the Lanczos ground-state solver."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from blockdmrg.algorithms.exact import heisenberg_matrix
from blockdmrg.algorithms.lanczos import lanczos_ground_state


def _random_symmetric(key, n):
    a = jax.random.normal(key, (n, n))
    return 0.5 * (a + a.T)


class TestDensePath:
    def test_small_matrix_uses_eigh(self):
        H = jnp.diag(jnp.array([3.0, -1.0, 2.0]))
        energy, vec = lanczos_ground_state(H)
        assert energy == pytest.approx(-1.0)
        np.testing.assert_allclose(jnp.abs(vec), [0.0, 1.0, 0.0], atol=1e-14)

    def test_two_spin_singlet(self):
        energy, vec = lanczos_ground_state(heisenberg_matrix(2))
        assert energy == pytest.approx(-0.75)
        # Singlet lives in the |ud>, |du> subspace
        assert float(vec[0]) == pytest.approx(0.0, abs=1e-12)
        assert float(vec[3]) == pytest.approx(0.0, abs=1e-12)
        assert abs(float(vec[1])) == pytest.approx(1.0 / np.sqrt(2.0))

    def test_one_by_one(self):
        energy, vec = lanczos_ground_state(jnp.array([[2.5]]))
        assert energy == pytest.approx(2.5)
        assert vec.shape == (1,)


class TestLanczosPath:
    def test_heisenberg_8_sites(self):
        H = heisenberg_matrix(8)
        expected = float(jnp.linalg.eigvalsh(H)[0])
        energy, vec = lanczos_ground_state(H, dense_cutoff=0)
        assert energy == pytest.approx(expected, abs=1e-9)
        assert float(jnp.linalg.norm(vec)) == pytest.approx(1.0)
        residual = H @ vec - energy * vec
        assert float(jnp.linalg.norm(residual)) < 1e-6

    def test_random_symmetric(self, rng):
        H = _random_symmetric(rng, 120)
        expected = float(jnp.linalg.eigvalsh(H)[0])
        energy, _ = lanczos_ground_state(H, max_iter=120, dense_cutoff=0)
        assert energy == pytest.approx(expected, abs=1e-8)

    def test_key_is_deterministic(self, rng):
        H = _random_symmetric(rng, 80)
        key = jax.random.PRNGKey(3)
        e1, v1 = lanczos_ground_state(H, max_iter=80, dense_cutoff=0, key=key)
        e2, v2 = lanczos_ground_state(H, max_iter=80, dense_cutoff=0, key=key)
        assert e1 == e2
        np.testing.assert_array_equal(v1, v2)

    def test_invariant_subspace_terminates_early(self):
        # Start vector cannot leave a 1-dimensional invariant subspace of the
        # identity: the first residual vanishes.
        energy, vec = lanczos_ground_state(jnp.eye(100), dense_cutoff=0)
        assert energy == pytest.approx(1.0)
        assert float(jnp.linalg.norm(vec)) == pytest.approx(1.0)

    def test_eigenvalue_is_upper_bound(self, rng):
        H = _random_symmetric(rng, 200)
        exact = float(jnp.linalg.eigvalsh(H)[0])
        energy, _ = lanczos_ground_state(H, max_iter=5, dense_cutoff=0)
        assert energy >= exact - 1e-12


class TestErrors:
    def test_non_square_raises(self):
        with pytest.raises(ValueError, match="square"):
            lanczos_ground_state(jnp.zeros((3, 4)))

    def test_vector_raises(self):
        with pytest.raises(ValueError, match="square"):
            lanczos_ground_state(jnp.zeros(4))
