"""Tests for the exact-diagonalisation reference."""

import jax.numpy as jnp
import numpy as np
import pytest

from blockdmrg.algorithms.exact import exact_ground_state_energy, heisenberg_matrix


class TestHeisenbergMatrix:
    @pytest.mark.parametrize("L", [2, 3, 5])
    def test_shape_and_symmetry(self, L):
        H = heisenberg_matrix(L)
        assert H.shape == (2**L, 2**L)
        np.testing.assert_allclose(H, H.T)

    def test_fully_polarised_state(self):
        # |uuuu> is an eigenstate with energy (L-1)/4
        H = heisenberg_matrix(4)
        assert float(H[0, 0]) == pytest.approx(0.75)
        np.testing.assert_allclose(H[1:, 0], 0.0)

    def test_ising_limit_is_diagonal(self):
        H = heisenberg_matrix(3, jz=1.0, jxy=0.0)
        np.testing.assert_allclose(H, jnp.diag(jnp.diag(H)))

    def test_too_short_raises(self):
        with pytest.raises(ValueError, match="at least 2"):
            heisenberg_matrix(1)


class TestExactEnergy:
    def test_two_sites(self):
        assert exact_ground_state_energy(2) == pytest.approx(-0.75)

    def test_four_sites(self, e4_per_site):
        assert exact_ground_state_energy(4) / 4 == pytest.approx(e4_per_site)

    def test_ten_sites(self):
        assert exact_ground_state_energy(10) == pytest.approx(-4.258035207, abs=1e-8)

    def test_ising_chain(self):
        assert exact_ground_state_energy(4, jz=1.0, jxy=0.0) == pytest.approx(-0.75)
