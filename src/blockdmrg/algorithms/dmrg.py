"""Block DMRG for the open spin-1/2 Heisenberg chain.

Two phases share one renormalisation step (superblock -> ground state ->
reduced density matrix -> truncation -> rotation -> growth by one site):

1. Infinite-system phase: a single block is grown from one spin to half the
   chain, each step diagonalising the block joined to its own mirror image.
   The truncation schedule (``GrowthSchedule``) keeps the basis exact until
   it would exceed ``m`` states and truncates to ``m`` afterwards.
2. Finite-system phase: a system block is grown against environment blocks
   read back from the block store, for a number of half-sweeps. Each
   half-sweep runs until the environment reaches ``min_environment_size``,
   below which the environment basis is exact; the next half-sweep restarts
   from a system of that size. Because the chain is reflection symmetric a
   block of ``n`` sites serves as either a left or a right block.

Architecture decisions:

- Loops are plain Python loops; block dimensions change between steps, so
  every array is built fresh at its new shape.
- The superblock Hamiltonian is formed explicitly as a matrix and handed to
  ``lanczos_ground_state``.
- Blocks travel between phases only through the ``BlockStore``.

Size conventions: the infinite phase reports ``E0 / (2 * n)`` for two blocks
of ``n`` sites; the finite phase reports ``E0 / L``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

import jax

from blockdmrg.algorithms.density_matrix import (
    Truncation,
    reduced_density_matrix,
    truncation_matrix,
    wavefunction_matrix,
)
from blockdmrg.algorithms.growth import GrowthSchedule, TruncationPhase
from blockdmrg.algorithms.lanczos import lanczos_ground_state
from blockdmrg.contraction.contractor import (
    add_site,
    rotate_block,
    superblock_hamiltonian,
)
from blockdmrg.core.block import Block, single_site_block
from blockdmrg.storage.block_store import (
    INFINITE_SWEEP,
    BlockStore,
    Direction,
    InMemoryBlockStore,
)

logger = logging.getLogger(__name__)

INFINITE = "infinite"
FINITE = "finite"


@dataclass
class DMRGConfig:
    """Configuration for a DMRG run.

    Attributes:
        states_to_keep:   ``m``, maximum number of states kept per block.
        num_sites:        Chain length ``L`` (even, >= 4).
        num_half_sweeps:  Number of finite-system half-sweeps (0 = infinite
                          phase only).
        jz:               Ising coupling.
        jxy:              XY coupling.
        lanczos_max_iter: Maximum Krylov dimension of the ground-state solve.
        lanczos_tol:      Lanczos residual tolerance.
        dense_cutoff:     Superblocks of at most this dimension are solved with
                          dense ``eigh`` instead of Lanczos.
        seed:             Seed for the Lanczos starting vectors.
        verbose:          Print each energy line when no callback is given.
    """

    states_to_keep: int = 8
    num_sites: int = 10
    num_half_sweeps: int = 0
    jz: float = 1.0
    jxy: float = 1.0
    lanczos_max_iter: int = 100
    lanczos_tol: float = 1e-12
    dense_cutoff: int = 64
    seed: int = 0
    verbose: bool = False

    def validate(self) -> None:
        """Check the preconditions of a run.

        Raises:
            ValueError: On ``m < 1``, an odd chain or one shorter than 4
                sites, a negative half-sweep count, or invalid solver settings.
        """
        if self.states_to_keep < 1:
            raise ValueError(
                f"states_to_keep must be at least 1, got {self.states_to_keep}"
            )
        if self.num_sites < 4 or self.num_sites % 2:
            raise ValueError(
                f"num_sites must be even and at least 4, got {self.num_sites}"
            )
        if self.num_half_sweeps < 0:
            raise ValueError(
                f"num_half_sweeps must be non-negative, got {self.num_half_sweeps}"
            )
        if self.lanczos_max_iter < 1 or self.lanczos_tol <= 0:
            raise ValueError(
                "lanczos_max_iter must be positive and lanczos_tol must be > 0, "
                f"got {self.lanczos_max_iter} and {self.lanczos_tol}"
            )
        if self.dense_cutoff < 0:
            raise ValueError(f"dense_cutoff must be >= 0, got {self.dense_cutoff}")


class StepRecord(NamedTuple):
    """One diagonalisation step.

    Attributes:
        phase:            ``"infinite"`` or ``"finite"``.
        half_sweep:       Half-sweep index, ``None`` in the infinite phase.
        sites_left:       Sites in the left block.
        sites_right:      Sites in the right block.
        energy:           Superblock ground-state energy.
        energy_per_site:  ``energy / (sites_left + sites_right)``.
        states_kept:      States retained by this step's truncation.
        truncation_error: Discarded density-matrix weight.
        truncation_phase: Growth-schedule phase (infinite phase only).
    """

    phase: str
    half_sweep: int | None
    sites_left: int
    sites_right: int
    energy: float
    energy_per_site: float
    states_kept: int
    truncation_error: float
    truncation_phase: TruncationPhase | None = None

    def format(self) -> str:
        """``"<left> <right> <energy per site>"`` with 16 significant digits."""
        return f"{self.sites_left} {self.sites_right} {self.energy_per_site:.16g}"


class DMRGResult(NamedTuple):
    """Result of a DMRG run.

    Attributes:
        energy_per_site:          Energy per site of the last step.
        infinite_energy_per_site: Energy per site at the end of the
                                  infinite-system phase.
        records:                  Every step, in order.
        final_block:              System block the next half-sweep would
                                  start from.
        store:                    Block store holding every persisted block.
    """

    energy_per_site: float
    infinite_energy_per_site: float
    records: list[StepRecord]
    final_block: Block
    store: BlockStore


def min_environment_size(m: int, num_sites: int) -> int:
    """Smallest ``r >= 3`` with ``2**r >= 2*m``, searched below ``num_sites``.

    An environment of ``r`` sites is represented exactly with ``2*m`` states,
    so sweeps turn around there. Returns ``num_sites`` when no such ``r``
    exists, in which case no sweep step can run.
    """
    r = 3
    while r < num_sites:
        if 2**r >= 2 * m:
            break
        r += 1
    return r


def _renormalize(
    system: Block,
    environment: Block,
    n_keep: int,
    config: DMRGConfig,
    key: jax.Array,
) -> tuple[float, Truncation]:
    """Solve the superblock and build the system's truncation matrix."""
    hamiltonian = superblock_hamiltonian(system, environment, config.jz, config.jxy)
    energy, vector = lanczos_ground_state(
        hamiltonian,
        max_iter=config.lanczos_max_iter,
        tol=config.lanczos_tol,
        dense_cutoff=config.dense_cutoff,
        key=key,
    )
    psi = wavefunction_matrix(vector, system.dim, environment.dim)
    rho = reduced_density_matrix(psi)
    return energy, truncation_matrix(rho, n_keep)


def _emitter(
    config: DMRGConfig, callback: Callable[[StepRecord], None] | None
) -> Callable[[StepRecord], None]:
    if callback is not None:
        return callback
    if config.verbose:
        return lambda record: print(record.format())
    return lambda record: None


def infinite_system(
    config: DMRGConfig,
    store: BlockStore,
    callback: Callable[[StepRecord], None] | None = None,
) -> tuple[list[StepRecord], Block]:
    """Grow one block from a single spin to ``L/2 + 1`` sites.

    Performs ``L/2 - 1`` diagonalisations, for block sizes ``2 .. L/2``.
    Every grown block (including the initial two-site block) is stored under
    sweep index ``INFINITE_SWEEP``.

    Returns:
        (records, last grown block)
    """
    emit = _emitter(config, callback)
    base_key = jax.random.PRNGKey(config.seed)
    schedule = GrowthSchedule(config.states_to_keep)
    half = config.num_sites // 2

    block = add_site(
        single_site_block(), config.jz, config.jxy, expected_dim=schedule.augmented_dim
    )
    store.store(block, block.size)
    logger.info(
        "infinite-system phase: L=%d, m=%d", config.num_sites, config.states_to_keep
    )

    records: list[StepRecord] = []
    while block.size <= half:
        was_truncating = schedule.truncating
        phase = schedule.begin_step(block.dim)
        if schedule.truncating and not was_truncating:
            logger.info("truncation starts at block size %d (%s)", block.size, phase.name)

        energy, truncation = _renormalize(
            block,
            block,
            schedule.states_to_keep,
            config,
            jax.random.fold_in(base_key, block.size),
        )
        record = StepRecord(
            phase=INFINITE,
            half_sweep=None,
            sites_left=block.size,
            sites_right=block.size,
            energy=energy,
            energy_per_site=energy / (2 * block.size),
            states_kept=schedule.states_to_keep,
            truncation_error=truncation.truncation_error,
            truncation_phase=phase,
        )
        records.append(record)
        emit(record)
        logger.debug(
            "block %d: kept %d of %d states, discarded weight %.3e",
            block.size,
            schedule.states_to_keep,
            block.dim,
            truncation.truncation_error,
        )

        schedule.pin()
        block = add_site(
            rotate_block(block, truncation.matrix),
            config.jz,
            config.jxy,
            expected_dim=schedule.augmented_dim,
        )
        schedule.freeze()
        store.store(block, block.size)

    logger.info("end of the infinite-system phase")
    return records, block


def finite_system(
    config: DMRGConfig,
    store: BlockStore,
    callback: Callable[[StepRecord], None] | None = None,
) -> tuple[list[StepRecord], Block]:
    """Sweep a system block across the chain ``num_half_sweeps`` times.

    Expects ``store`` to hold the infinite-phase blocks. Each step truncates
    to exactly ``m`` states and stores the grown system block under
    ``(new size, half-sweep, direction)``.

    Returns:
        (records, system block the next half-sweep would start from)
    """
    emit = _emitter(config, callback)
    L = config.num_sites
    m = config.states_to_keep
    min_env = min_environment_size(m, L)
    base_key = jax.random.fold_in(jax.random.PRNGKey(config.seed), L)

    system_size = L // 2
    system = store.load(system_size, 0)
    records: list[StepRecord] = []

    if config.num_half_sweeps and min_env > L // 2:
        logger.warning(
            "minimum environment size %d exceeds half the chain (%d); "
            "finite-system sweeps have nothing to do",
            min_env,
            L // 2,
        )
        return records, system

    for half_sweep in range(config.num_half_sweeps):
        direction = Direction.for_half_sweep(half_sweep)
        logger.info("half-sweep %d (%s)", half_sweep, direction.name.lower())
        while system_size <= L - min_env:
            env_size = L - system_size
            environment = store.load(env_size, half_sweep)

            energy, truncation = _renormalize(
                system,
                environment,
                m,
                config,
                jax.random.fold_in(base_key, half_sweep * L + system_size),
            )
            if half_sweep % 2 == 0:
                left, right = system_size, env_size
            else:
                left, right = env_size, system_size
            record = StepRecord(
                phase=FINITE,
                half_sweep=half_sweep,
                sites_left=left,
                sites_right=right,
                energy=energy,
                energy_per_site=energy / L,
                states_kept=m,
                truncation_error=truncation.truncation_error,
            )
            records.append(record)
            emit(record)

            system = add_site(
                rotate_block(system, truncation.matrix), config.jz, config.jxy
            )
            system_size += 1
            store.store(system, system_size, half_sweep, direction)

        system_size = min_env
        system = store.load(system_size, half_sweep)

    return records, system


def dmrg(
    config: DMRGConfig,
    store: BlockStore | None = None,
    callback: Callable[[StepRecord], None] | None = None,
) -> DMRGResult:
    """Run the infinite-system phase followed by the finite-system sweeps.

    Args:
        config:   DMRGConfig parameters.
        store:    Block store (defaults to a fresh ``InMemoryBlockStore``).
        callback: Called with every ``StepRecord`` as soon as it is produced.

    Returns:
        DMRGResult with energies, step records, final block and the store.

    Raises:
        ValueError: If ``config`` violates a precondition.
    """
    config.validate()
    if store is None:
        store = InMemoryBlockStore()

    infinite_records, _ = infinite_system(config, store, callback)
    finite_records, final_block = finite_system(config, store, callback)

    records = infinite_records + finite_records
    return DMRGResult(
        energy_per_site=records[-1].energy_per_site,
        infinite_energy_per_site=infinite_records[-1].energy_per_site,
        records=records,
        final_block=final_block,
        store=store,
    )
