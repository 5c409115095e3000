"""Tests for the stage consistency validator"""
import itertools

import pytest

from minci.core.errors import InvalidStageSequence, InvalidStages, InvalidTimestampSequence
from minci.core.stages import validate_stages


def _accepted(stages) -> bool:
    """Reference rule: zeros only trail, and non-zero stages never go back in time."""
    reached = [s for s in stages if s != 0]
    if stages[: len(reached)] != tuple(reached):
        return False
    return all(b >= a for a, b in zip(reached, reached[1:]))


def test_complete_run_accepted():
    validate_stages((100, 110, 120, 130, 140, 150, 160), "")


def test_partial_run_accepted():
    validate_stages((100, 110, 120, 130, 0, 0, 0), "tests failed")


def test_equal_timestamps_accepted():
    validate_stages((100, 100, 100, 100, 100, 100, 100), "")


def test_stage_after_unreached_rejected():
    with pytest.raises(InvalidStages):
        validate_stages((100, 110, 0, 50, 0, 0, 0), "")


def test_decreasing_timestamp_rejected():
    with pytest.raises(InvalidTimestampSequence):
        validate_stages((100, 110, 105, 0, 0, 0, 0), "")


def test_env_before_start_rejected():
    with pytest.raises(InvalidTimestampSequence):
        validate_stages((100, 90, 0, 0, 0, 0, 0), "")


def test_log_with_success_rejected():
    with pytest.raises(InvalidStages):
        validate_stages((100, 110, 120, 130, 140, 150, 160), "warning: something")


def test_log_without_success_accepted():
    validate_stages((100, 110, 120, 130, 140, 150, 0), "install failed")


def test_wrong_stage_count_rejected():
    with pytest.raises(InvalidStages):
        validate_stages((100, 110), "")


def test_failures_share_a_base_class():
    assert issubclass(InvalidStages, InvalidStageSequence)
    assert issubclass(InvalidTimestampSequence, InvalidStageSequence)


def test_validator_matches_reference_rule():
    """Exhaustive check over small timestamps for every stage after start"""
    for tail in itertools.product((0, 5, 10), repeat=6):
        stages = (5,) + tail
        if _accepted(stages):
            validate_stages(stages, "")
        else:
            with pytest.raises(InvalidStageSequence):
                validate_stages(stages, "")
