"""Tests for spin operators and the Block value type."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from blockdmrg.core.block import OPERATOR_NAMES, Block, single_site_block
from blockdmrg.core.operators import SITE_DIM, identity, spin_half_ops


class TestSpinHalfOps:
    def test_keys(self, ops):
        assert set(ops) == {"Sz", "Sp", "Sm", "Id"}

    def test_shapes(self, ops):
        for op in ops.values():
            assert op.shape == (SITE_DIM, SITE_DIM)

    def test_dtype_is_float64(self, ops):
        assert ops["Sz"].dtype == jnp.float64

    def test_commutator_sp_sm_is_2sz(self, ops):
        comm = ops["Sp"] @ ops["Sm"] - ops["Sm"] @ ops["Sp"]
        np.testing.assert_allclose(comm, 2 * ops["Sz"])

    def test_sm_is_transpose_of_sp(self, ops):
        np.testing.assert_array_equal(ops["Sm"], ops["Sp"].T)

    def test_explicit_float32(self):
        assert spin_half_ops(jnp.float32)["Sz"].dtype == jnp.float32


class TestIdentity:
    def test_values(self):
        np.testing.assert_array_equal(identity(3), np.eye(3))

    def test_zero_raises(self):
        with pytest.raises(ValueError, match="positive"):
            identity(0)


class TestBlock:
    def test_single_site_block(self, site_block, ops):
        assert site_block.size == 1
        assert site_block.dim == 2
        np.testing.assert_array_equal(site_block.hamiltonian, jnp.zeros((2, 2)))
        np.testing.assert_array_equal(site_block.sz, ops["Sz"])
        np.testing.assert_array_equal(site_block.sp, ops["Sp"])
        np.testing.assert_array_equal(site_block.sm, ops["Sm"])

    def test_operators_dict_order(self, random_block):
        assert tuple(random_block.operators()) == OPERATOR_NAMES

    def test_mismatched_dimension_raises(self):
        with pytest.raises(ValueError, match="'sz'"):
            Block(2, jnp.zeros((4, 4)), jnp.zeros((2, 2)), jnp.zeros((4, 4)), jnp.zeros((4, 4)))

    def test_non_square_raises(self):
        with pytest.raises(ValueError):
            Block(2, jnp.zeros((4, 3)), jnp.zeros((4, 3)), jnp.zeros((4, 3)), jnp.zeros((4, 3)))

    def test_non_positive_size_raises(self):
        z = jnp.zeros((2, 2))
        with pytest.raises(ValueError, match="size"):
            Block(0, z, z, z, z)

    def test_repr(self, random_block):
        assert repr(random_block) == "Block(size=5, dim=6)"


class TestBlockPytree:
    def test_leaves_are_the_four_operators(self, random_block):
        leaves = jax.tree_util.tree_leaves(random_block)
        assert len(leaves) == 4

    def test_tree_map_keeps_size(self, random_block):
        doubled = jax.tree_util.tree_map(lambda op: 2 * op, random_block)
        assert isinstance(doubled, Block)
        assert doubled.size == random_block.size
        np.testing.assert_allclose(doubled.sp, 2 * random_block.sp)

    def test_jit_through_block(self, random_block):
        @jax.jit
        def trace_h(block):
            return jnp.trace(block.hamiltonian)

        assert float(trace_h(random_block)) == pytest.approx(
            float(jnp.trace(random_block.hamiltonian))
        )
