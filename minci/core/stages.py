"""Consistency checks for the reported pipeline timeline."""
from typing import Sequence

from minci.core.errors import InvalidStages, InvalidTimestampSequence

STAGES = ("start", "env", "depend", "build", "test", "install", "distcheck")


def validate_stages(stages: Sequence[int], log: str) -> None:
    """
    Reject timelines that do not progress monotonically.

    A stage is reached when its timestamp is non-zero. A reached stage needs
    its predecessor reached and completed no later than itself. A run that
    reached distcheck succeeded and must not carry a failure log.

    Args:
        stages: Timestamps for STAGES, in order
        log: Submitted log text
    Raises:
        InvalidStages: A stage follows an unreached one, or success with a log
        InvalidTimestampSequence: A stage completed before its predecessor
    """
    if len(stages) != len(STAGES):
        raise InvalidStages(f"expected {len(STAGES)} stages, got {len(stages)}")

    for i in range(1, len(STAGES)):
        if stages[i] != 0 and stages[i - 1] == 0:
            raise InvalidStages(f"{STAGES[i]} reached after {STAGES[i - 1]} was not")

    if stages[-1] != 0 and log:
        raise InvalidStages("log submitted for a successful run")

    for i in range(1, len(STAGES)):
        if stages[i] != 0 and stages[i] < stages[i - 1]:
            raise InvalidTimestampSequence(
                f"{STAGES[i]} at {stages[i]} precedes {STAGES[i - 1]} at {stages[i - 1]}"
            )
