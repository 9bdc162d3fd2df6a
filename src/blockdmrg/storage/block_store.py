"""Block persistence keyed by (size, sweep index, direction).

The infinite-system phase writes one block per growth step; the finite-system
phase writes one block per step of every half-sweep and reads environment
blocks written earlier, possibly by an earlier half-sweep. Infinite-phase
blocks are stored under sweep index ``INFINITE_SWEEP`` (-1).

``load(size, sweep_index)`` returns the most recently written block of that
size whose sweep index is ``<= sweep_index``.

Two implementations share that lookup rule:

- ``InMemoryBlockStore``: a dict, for tests and short runs.
- ``NpzBlockStore``: one ``np.savez_compressed`` file per key in a directory,
  e.g. ``block_L12_S3_left.npz``. Opening an existing directory re-indexes
  the files already there.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from enum import IntEnum
from pathlib import Path
from typing import NamedTuple

import jax.numpy as jnp
import numpy as np

from blockdmrg.core.block import OPERATOR_NAMES, Block

logger = logging.getLogger(__name__)

INFINITE_SWEEP = -1


class Direction(IntEnum):
    """Direction in which the stored block was being grown."""

    INFINITE = 0
    RIGHT = 1
    LEFT = -1

    @classmethod
    def for_half_sweep(cls, half_sweep: int) -> Direction:
        return cls.RIGHT if half_sweep % 2 == 0 else cls.LEFT


class BlockKey(NamedTuple):
    size: int
    sweep_index: int
    direction: Direction


class BlockStore(ABC):
    """Key-value store of blocks.

    Subclasses implement ``_write`` and ``_read``; key bookkeeping and the
    lookup rule live here.
    """

    def __init__(self) -> None:
        self._keys: list[BlockKey] = []

    # --- Storage backend ---

    @abstractmethod
    def _write(self, key: BlockKey, block: Block) -> None:
        """Persist ``block`` under ``key``, replacing any previous value."""

    @abstractmethod
    def _read(self, key: BlockKey) -> Block:
        """Return the block stored under ``key``."""

    # --- Public API ---

    def store(
        self,
        block: Block,
        size: int,
        sweep_index: int = INFINITE_SWEEP,
        direction: Direction = Direction.INFINITE,
    ) -> BlockKey:
        """Persist ``block`` as the block of ``size`` sites.

        Raises:
            ValueError: If ``size`` disagrees with ``block.size``.
        """
        if size != block.size:
            raise ValueError(
                f"storing a block of {block.size} sites under size {size}"
            )
        key = BlockKey(int(size), int(sweep_index), Direction(direction))
        self._write(key, block)
        if key in self._keys:
            self._keys.remove(key)
        self._keys.append(key)
        logger.debug(
            "stored block size=%d sweep=%d %s",
            key.size,
            key.sweep_index,
            key.direction.name,
        )
        return key

    def load(self, size: int, sweep_index: int) -> Block:
        """Most recent block of ``size`` sites written at sweep ``<= sweep_index``.

        Raises:
            KeyError: If no such block was stored.
        """
        for key in reversed(self._keys):
            if key.size == size and key.sweep_index <= sweep_index:
                return self._read(key)
        raise KeyError(
            f"no block of size {size} stored at or before sweep {sweep_index}"
        )

    def keys(self) -> list[BlockKey]:
        """Stored keys, oldest write first."""
        return list(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class InMemoryBlockStore(BlockStore):
    """Blocks held in a dict."""

    def __init__(self) -> None:
        super().__init__()
        self._blocks: dict[BlockKey, Block] = {}

    def _write(self, key: BlockKey, block: Block) -> None:
        self._blocks[key] = block

    def _read(self, key: BlockKey) -> Block:
        return self._blocks[key]


_FILENAME_RE = re.compile(r"^block_L(\d+)_S(-?\d+)_(infinite|right|left)\.npz$")


class NpzBlockStore(BlockStore):
    """Blocks persisted as compressed ``.npz`` files in ``directory``.

    Args:
        directory: Target directory, created if missing. Files already present
                   are indexed in (sweep index, size) order.
    """

    def __init__(self, directory: str | Path) -> None:
        super().__init__()
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        found = []
        for path in self.directory.glob("block_*.npz"):
            match = _FILENAME_RE.match(path.name)
            if match is None:
                continue
            size, sweep, direction = match.groups()
            found.append(BlockKey(int(size), int(sweep), Direction[direction.upper()]))
        self._keys = sorted(found, key=lambda k: (k.sweep_index, k.size))
        if self._keys:
            logger.info("indexed %d stored blocks in %s", len(self._keys), self.directory)

    def path_for(self, key: BlockKey) -> Path:
        name = f"block_L{key.size}_S{key.sweep_index}_{key.direction.name.lower()}.npz"
        return self.directory / name

    def _write(self, key: BlockKey, block: Block) -> None:
        data = {name: np.asarray(op) for name, op in block.operators().items()}
        np.savez_compressed(self.path_for(key), size=block.size, **data)

    def _read(self, key: BlockKey) -> Block:
        with np.load(self.path_for(key)) as fin:
            size = int(fin["size"])
            ops = [jnp.asarray(fin[name]) for name in OPERATOR_NAMES]
        return Block(size, *ops)
