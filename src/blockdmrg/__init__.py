"""blockdmrg: block-based DMRG for the spin-1/2 Heisenberg chain on JAX.

Computes the ground-state energy per site of an open Heisenberg chain with
the infinite-system algorithm followed by finite-system sweeps, keeping at
most ``m`` states per block.

.. note::
    Importing ``blockdmrg`` enables JAX 64-bit mode (``jax_enable_x64``).
    All operators and energies are ``float64``.

Quick start::

    from blockdmrg import DMRGConfig, dmrg

    result = dmrg(DMRGConfig(states_to_keep=8, num_sites=10, num_half_sweeps=2))
    for record in result.records:
        print(record.format())
"""

import jax

jax.config.update("jax_enable_x64", True)

from blockdmrg.algorithms.density_matrix import (
    Truncation,
    reduced_density_matrix,
    truncation_matrix,
    wavefunction_matrix,
)
from blockdmrg.algorithms.dmrg import (
    DMRGConfig,
    DMRGResult,
    StepRecord,
    dmrg,
    finite_system,
    infinite_system,
    min_environment_size,
)
from blockdmrg.algorithms.exact import exact_ground_state_energy, heisenberg_matrix
from blockdmrg.algorithms.growth import GrowthSchedule, TruncationPhase
from blockdmrg.algorithms.lanczos import lanczos_ground_state
from blockdmrg.contraction.contractor import (
    add_site,
    kron,
    outer_product,
    reduce_pairs,
    rotate_block,
    superblock_hamiltonian,
    superblock_tensor,
    transform_operator,
    transpose,
)
from blockdmrg.core.block import Block, single_site_block
from blockdmrg.core.operators import identity, spin_half_ops
from blockdmrg.storage.block_store import (
    INFINITE_SWEEP,
    BlockKey,
    BlockStore,
    Direction,
    InMemoryBlockStore,
    NpzBlockStore,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Block",
    "single_site_block",
    "identity",
    "spin_half_ops",
    # Contraction
    "outer_product",
    "reduce_pairs",
    "kron",
    "transpose",
    "transform_operator",
    "rotate_block",
    "superblock_tensor",
    "superblock_hamiltonian",
    "add_site",
    # Storage
    "INFINITE_SWEEP",
    "BlockKey",
    "BlockStore",
    "Direction",
    "InMemoryBlockStore",
    "NpzBlockStore",
    # Density matrix
    "Truncation",
    "wavefunction_matrix",
    "reduced_density_matrix",
    "truncation_matrix",
    # Growth schedule
    "GrowthSchedule",
    "TruncationPhase",
    # Solvers
    "lanczos_ground_state",
    "exact_ground_state_energy",
    "heisenberg_matrix",
    # DMRG
    "DMRGConfig",
    "DMRGResult",
    "StepRecord",
    "dmrg",
    "infinite_system",
    "finite_system",
    "min_environment_size",
]
