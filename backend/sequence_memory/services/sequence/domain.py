"""Value types shared by the round machine and the stats store."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class RoundPhase(str, Enum):
    IDLE = 'idle'
    MEMORIZING = 'memorizing'
    AWAITING_ANSWER = 'awaiting_answer'
    REVEALED = 'revealed'


@dataclass(frozen=True)
class RoundConfig:
    """Settings for one round. Snapshotted when the round starts."""
    sequence_length: int = 6
    memorize_seconds: int = 5
    number_range: int = 9  # exclusive upper bound
    backwards: bool = False
    speak_enabled: bool = False
    display_enabled: bool = True
    speech_rate: float = 1.0

    @property
    def can_start(self) -> bool:
        """A round needs at least one way to present the sequence."""
        return self.speak_enabled or self.display_enabled

    def validate(self) -> None:
        if self.sequence_length < 1:
            raise ValueError(f"Sequence length must be at least 1, got {self.sequence_length}")
        if self.memorize_seconds < 0:
            raise ValueError(f"Memorize time cannot be negative, got {self.memorize_seconds}")
        if self.number_range < 1:
            raise ValueError(f"Number range must be at least 1, got {self.number_range}")
        if self.speech_rate <= 0:
            raise ValueError(f"Speech rate must be positive, got {self.speech_rate}")

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class RunResult:
    total: int
    correct: int

    def to_dict(self):
        return {'total': self.total, 'correct': self.correct}

    @classmethod
    def from_dict(cls, data) -> 'RunResult':
        total, correct = data['total'], data['correct']
        # bool is an int subclass; reject it along with floats and strings
        for value in (total, correct):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Run counts must be integers, got {value!r}")
        return cls(total=total, correct=correct)


@dataclass(frozen=True)
class StatsSummary:
    correct_total: int
    attempted_total: int
    runs: int
    percentage: Optional[str]  # None means there is nothing to report yet

    def to_dict(self):
        return asdict(self)
