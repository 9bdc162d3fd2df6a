"""Tests for the infinite-system truncation schedule."""

import pytest

from blockdmrg.algorithms.growth import GrowthSchedule, TruncationPhase


def _run(m, steps):
    """Drive a schedule the way the growth loop does, returning per-step data."""
    schedule = GrowthSchedule(m)
    dim = schedule.augmented_dim
    out = []
    for _ in range(steps):
        phase = schedule.begin_step(dim)
        keep = schedule.states_to_keep
        schedule.pin()
        dim = schedule.augmented_dim
        schedule.freeze()
        assert schedule.augmented_dim == dim
        out.append((phase, keep, dim))
    return out


class TestGrowthSchedule:
    def test_initial_state(self):
        schedule = GrowthSchedule(8)
        assert schedule.phase is TruncationPhase.EXACT
        assert schedule.state_count == 2
        assert schedule.states_to_keep == 2
        assert schedule.augmented_dim == 4
        assert not schedule.truncating

    def test_power_of_two(self):
        steps = _run(8, 5)
        assert [s[0] for s in steps] == [
            TruncationPhase.EXACT,
            TruncationPhase.EXACT,
            TruncationPhase.ONSET,
            TruncationPhase.STEADY,
            TruncationPhase.STEADY,
        ]
        assert [s[1] for s in steps] == [4, 8, 8, 8, 8]
        assert [s[2] for s in steps] == [8, 16, 16, 16, 16]

    def test_not_power_of_two(self):
        steps = _run(6, 4)
        assert [s[0] for s in steps] == [
            TruncationPhase.EXACT,
            TruncationPhase.ONSET,
            TruncationPhase.STEADY,
            TruncationPhase.STEADY,
        ]
        assert [s[1] for s in steps] == [4, 6, 6, 6]
        assert [s[2] for s in steps] == [8, 12, 12, 12]

    def test_single_state(self):
        steps = _run(1, 3)
        assert steps[0][0] is TruncationPhase.ONSET
        assert [s[1] for s in steps] == [1, 1, 1]
        assert [s[2] for s in steps] == [2, 2, 2]

    @pytest.mark.parametrize("m", [1, 2, 3, 5, 8, 12, 16, 20])
    def test_block_dimension_is_twice_kept_states(self, m):
        for _, keep, dim in _run(m, 8):
            assert dim == 2 * keep

    def test_onset_then_pinned_within_one_step(self):
        schedule = GrowthSchedule(2)
        assert schedule.begin_step(4) is TruncationPhase.ONSET
        assert schedule.truncating
        schedule.pin()
        assert schedule.phase is TruncationPhase.PINNED
        assert schedule.state_count == 2
        schedule.freeze()
        assert schedule.phase is TruncationPhase.STEADY

    def test_pin_and_freeze_are_noops_when_exact(self):
        schedule = GrowthSchedule(16)
        schedule.begin_step(4)
        schedule.pin()
        schedule.freeze()
        assert schedule.phase is TruncationPhase.EXACT
        assert schedule.state_count == 4


class TestGrowthScheduleErrors:
    def test_non_positive_m_raises(self):
        with pytest.raises(ValueError, match="max_states"):
            GrowthSchedule(0)

    def test_keep_more_than_available_raises(self):
        schedule = GrowthSchedule(8)
        with pytest.raises(ValueError, match="only 2 are available"):
            schedule.begin_step(2)
