"""Truncation schedule of the infinite-system (block-growth) phase.

The block starts as exact as possible and is only truncated once its basis
would exceed ``m`` states. Two counters drive this:

- ``state_count``: size of the untruncated basis, doubling 2, 4, 8, ...
  until truncation starts, then pinned to ``m``.
- ``states_to_keep``: states retained after each step, ramping
  ``min(2 * states_to_keep, m)`` from 2.

and a four-phase state machine:

    EXACT --begin_step, 2*state_count > m--> ONSET --pin--> PINNED --freeze--> STEADY

- ``EXACT``:  ``2 * state_count <= m``; the step doubles ``state_count`` and
  the "truncation" keeps every state.
- ``ONSET``:  the first step whose doubling would exceed ``m``; truncation
  starts this step.
- ``PINNED``: right after the onset truncation; ``state_count`` is set to
  ``m`` for good.
- ``STEADY``: once the grown block has been reassembled; the block plus one
  site always spans ``2 * m`` states.

Within the growth loop each step calls ``begin_step`` before truncating,
``pin`` after truncating and ``freeze`` after growing the block, so the
ONSET and PINNED phases are both visited during the first truncating step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class TruncationPhase(IntEnum):
    """Phase of the block-growth truncation schedule."""

    EXACT = 0
    ONSET = 1
    PINNED = 2
    STEADY = 3


@dataclass
class GrowthSchedule:
    """Mutable truncation schedule for one infinite-system run.

    Attributes:
        max_states:     ``m``, the number of states to keep.
        state_count:    Untruncated basis size of the current block's half.
        states_to_keep: States retained by the latest truncation.
        phase:          Current ``TruncationPhase``.
    """

    max_states: int
    state_count: int = 2
    states_to_keep: int = 2
    phase: TruncationPhase = TruncationPhase.EXACT

    def __post_init__(self) -> None:
        if self.max_states < 1:
            raise ValueError(f"max_states must be positive, got {self.max_states}")

    def begin_step(self, available: int) -> TruncationPhase:
        """Advance the counters for one growth step.

        Args:
            available: Dimension of the basis about to be truncated.

        Returns:
            The phase governing this step's truncation.

        Raises:
            ValueError: If the schedule would keep more than ``available``
                states.
        """
        self.states_to_keep = min(2 * self.states_to_keep, self.max_states)
        if self.phase is TruncationPhase.EXACT:
            if 2 * self.state_count <= self.max_states:
                self.state_count *= 2
            else:
                self.phase = TruncationPhase.ONSET
        if self.states_to_keep > available:
            raise ValueError(
                f"schedule asks for {self.states_to_keep} states but only "
                f"{available} are available"
            )
        return self.phase

    def pin(self) -> None:
        """ONSET -> PINNED: freeze the untruncated size at ``m``."""
        if self.phase is TruncationPhase.ONSET:
            self.phase = TruncationPhase.PINNED
            self.state_count = self.max_states

    def freeze(self) -> None:
        """PINNED -> STEADY: the augmented dimension is ``2 * m`` from now on."""
        if self.phase is TruncationPhase.PINNED:
            self.phase = TruncationPhase.STEADY

    @property
    def augmented_dim(self) -> int:
        """Dimension of the retained basis plus one site."""
        if self.phase is TruncationPhase.STEADY:
            return 2 * self.max_states
        return 2 * self.state_count

    @property
    def truncating(self) -> bool:
        return self.phase is not TruncationPhase.EXACT
