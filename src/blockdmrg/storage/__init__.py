"""Block persistence."""

from blockdmrg.storage.block_store import (
    INFINITE_SWEEP,
    BlockKey,
    BlockStore,
    Direction,
    InMemoryBlockStore,
    NpzBlockStore,
)

__all__ = [
    "INFINITE_SWEEP",
    "BlockKey",
    "BlockStore",
    "Direction",
    "InMemoryBlockStore",
    "NpzBlockStore",
]
