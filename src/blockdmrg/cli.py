"""Command-line entry point.

Usage::

    blockdmrg 8 10 2                 # m, chain length, half-sweeps
    blockdmrg                        # prompts for the three values on stdin
    python -m blockdmrg 16 20 4 --store-dir blocks/ --verbose

Prints one line per diagonalisation step::

    <sites in left block> <sites in right block> <energy per site>
"""

from __future__ import annotations

import argparse
import logging
import sys

from blockdmrg.algorithms.dmrg import DMRGConfig, StepRecord, dmrg
from blockdmrg.storage.block_store import InMemoryBlockStore, NpzBlockStore

logger = logging.getLogger(__name__)

_PROMPTS = {
    "states_to_keep": "# states to keep: ",
    "num_sites": "System size : ",
    "num_half_sweeps": "FSA sweeps : ",
}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="blockdmrg",
        description="Ground-state energy per site of the open Heisenberg chain by DMRG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "states_to_keep",
        nargs="?",
        type=int,
        help="Number of states to keep per block (m)",
    )
    parser.add_argument(
        "num_sites",
        nargs="?",
        type=int,
        help="Chain length (even, >= 4)",
    )
    parser.add_argument(
        "num_half_sweeps",
        nargs="?",
        type=int,
        help="Number of finite-system half-sweeps",
    )
    parser.add_argument(
        "--store-dir",
        default=None,
        help="Persist blocks as .npz files in this directory (default: in memory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log progress to stderr",
    )
    return parser.parse_args(argv)


def _prompt_missing(args: argparse.Namespace) -> None:
    """Read values not given on the command line from stdin.

    Values are whitespace-separated tokens, so ``echo "8 10 2" | blockdmrg``
    answers all three prompts; a new line is read only once the current one
    is used up.

    Raises:
        EOFError: If stdin ends before every missing value was read.
        ValueError: If a token is not an integer.
    """
    tokens: list[str] = []
    for name, prompt in _PROMPTS.items():
        if getattr(args, name) is not None:
            continue
        print(prompt, end="", flush=True)
        while not tokens:
            line = sys.stdin.readline()
            if not line:
                raise EOFError(f"stdin ended before a value for {name} was read")
            tokens = line.split()
        setattr(args, name, int(tokens.pop(0)))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        _prompt_missing(args)
        config = DMRGConfig(
            states_to_keep=args.states_to_keep,
            num_sites=args.num_sites,
            num_half_sweeps=args.num_half_sweeps,
        )
        config.validate()
    except (ValueError, EOFError) as exc:
        print(f"blockdmrg: error: {exc}", file=sys.stderr)
        return 2

    store = NpzBlockStore(args.store_dir) if args.store_dir else InMemoryBlockStore()

    def print_record(record: StepRecord) -> None:
        print(record.format(), flush=True)

    result = dmrg(config, store=store, callback=print_record)
    logger.info(
        "%d steps, final energy per site %.16g",
        len(result.records),
        result.energy_per_site,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
