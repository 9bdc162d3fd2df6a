"""DMRG algorithms: growth schedule, truncation, ground-state solver, sweeps."""

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

__all__ = [
    # DMRG
    "DMRGConfig",
    "DMRGResult",
    "StepRecord",
    "dmrg",
    "infinite_system",
    "finite_system",
    "min_environment_size",
    # Growth schedule
    "GrowthSchedule",
    "TruncationPhase",
    # Density matrix
    "Truncation",
    "wavefunction_matrix",
    "reduced_density_matrix",
    "truncation_matrix",
    # Solvers
    "lanczos_ground_state",
    "exact_ground_state_energy",
    "heisenberg_matrix",
]
