"""Shared fixtures for the blockdmrg test suite."""

import jax
import numpy as np
import pytest

import blockdmrg  # noqa: F401  (enables x64 before any array is built)
from blockdmrg.contraction.contractor import add_site
from blockdmrg.core.block import Block, single_site_block
from blockdmrg.core.operators import spin_half_ops
from blockdmrg.storage.block_store import InMemoryBlockStore, NpzBlockStore

# ------------------------------------------------------------------ #
# Operator fixtures                                                    #
# ------------------------------------------------------------------ #

@pytest.fixture
def ops():
    return spin_half_ops()


@pytest.fixture
def rng():
    return jax.random.PRNGKey(42)


# ------------------------------------------------------------------ #
# Block fixtures                                                       #
# ------------------------------------------------------------------ #

@pytest.fixture
def site_block():
    return single_site_block()


@pytest.fixture
def two_site_block():
    """Exact two-site block: H = S1.S2, edge operators on site 2."""
    return add_site(single_site_block())


@pytest.fixture
def random_block(rng):
    """A 6-state block with random symmetric operators."""
    keys = jax.random.split(rng, 4)
    mats = []
    for k in keys:
        a = jax.random.normal(k, (6, 6))
        mats.append(a + a.T)
    return Block(5, *mats)


# ------------------------------------------------------------------ #
# Store fixtures                                                       #
# ------------------------------------------------------------------ #

@pytest.fixture
def memory_store():
    return InMemoryBlockStore()


@pytest.fixture
def npz_store(tmp_path):
    return NpzBlockStore(tmp_path / "blocks")


@pytest.fixture(params=["memory", "npz"])
def any_store(request, tmp_path):
    """Each BlockStore implementation in turn."""
    if request.param == "memory":
        return InMemoryBlockStore()
    return NpzBlockStore(tmp_path / "blocks")


# ------------------------------------------------------------------ #
# Reference values                                                     #
# ------------------------------------------------------------------ #

@pytest.fixture
def e4_per_site():
    """Ground-state energy per site of the 4-site open Heisenberg chain."""
    return -(3.0 + 2.0 * np.sqrt(3.0)) / 16.0
