from enum import Enum


class FlushOutcome(Enum):
    SKIPPED = "skipped"  # another flush cycle was already running
    DRAINED = "drained"  # buffer emptied
    ABANDONED = "abandoned"  # a batch exhausted its attempts
