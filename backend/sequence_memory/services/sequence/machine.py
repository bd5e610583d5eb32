import logging
import re
import threading
from functools import partial
from typing import Callable, List, Optional, Tuple

from .domain import RoundConfig, RoundPhase, RunResult
from .stats import StatsStore


_LEADING_INT = re.compile(r'\s*([+-]?\d+)', re.ASCII)

ACTIVE_PHASES = (RoundPhase.MEMORIZING, RoundPhase.AWAITING_ANSWER)


def parse_answer(raw: Optional[str]) -> Optional[int]:
    """Leading integer of ``raw`` read like JavaScript's ``parseInt``, else None.

    "07" -> 7, " 3" -> 3, "4x" -> 4, "x4" -> None.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


class RoundStateMachine:
    """Owns one player's round: sequence, countdown, answers and scoring.

    Phases run IDLE -> MEMORIZING -> AWAITING_ANSWER -> REVEALED, and a new
    round can be started from any phase. Actions whose gate is closed return
    False (or None for ``reveal``) and change nothing.

    Timer and speech callbacks are bound to the round id they were issued for
    and are dropped once a newer round has started. All mutation happens
    under one re-entrant lock, so the timer thread, socket handlers and HTTP
    requests never interleave; between the timer and speech completion the
    last writer wins.
    """

    def __init__(self, generator, timer, stats: StatsStore, announcer=None,
                 config: Optional[RoundConfig] = None, logger=None,
                 on_change: Optional[Callable[[dict], None]] = None):
        self.generator = generator
        self.timer = timer
        self.stats = stats
        self.announcer = announcer
        self.config = config or RoundConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.on_change = on_change
        self._lock = threading.RLock()

        self.phase = RoundPhase.IDLE
        self.round_id = 0
        self.round_config: Optional[RoundConfig] = None
        self.sequence: Tuple[int, ...] = ()
        self.answers: List[Optional[str]] = []
        self.sequence_visible = False
        self.answer_visible = False
        self.answer_disabled = False
        self.reveal_disabled = True
        self.time_left = 0
        self.correct_answers = 0

    # ---- configuration ----

    @property
    def can_configure(self) -> bool:
        return self.phase in (RoundPhase.IDLE, RoundPhase.REVEALED)

    @property
    def backwards_locked(self) -> bool:
        """Direction cannot change while a round is waiting to be scored."""
        return self.phase in ACTIVE_PHASES

    def configure(self, config: RoundConfig) -> bool:
        config.validate()
        with self._lock:
            if not self.can_configure:
                self.logger.info(f"[configure-skip] round={self.round_id} phase={self.phase.value}")
                return False
            self.config = config
            self.logger.info(f"[configure] {config}")
            self._notify()
            return True

    # ---- round lifecycle ----

    def start_round(self) -> bool:
        with self._lock:
            config = self.config
            if not config.can_start:
                self.logger.info("[round-skip] neither display nor speech is enabled")
                return False

            self.round_id += 1
            round_id = self.round_id
            self.round_config = config
            self.sequence = self.generator.generate(config.sequence_length, config.number_range)
            self.answers = [''] * len(self.sequence)
            self.phase = RoundPhase.MEMORIZING
            self.sequence_visible = config.display_enabled
            self.answer_visible = False
            self.answer_disabled = False
            self.reveal_disabled = True
            self.time_left = config.memorize_seconds
            self.correct_answers = 0
            self.logger.info(
                f"[round-start] round={round_id} length={config.sequence_length} range={config.number_range} "
                f"memorize={config.memorize_seconds}s backwards={config.backwards} "
                f"display={config.display_enabled} speak={config.speak_enabled}"
            )

            self.timer.start(
                config.memorize_seconds,
                partial(self._handle_tick, round_id),
                partial(self._handle_expire, round_id),
            )
            if config.speak_enabled and self.announcer is not None:
                text = ', '.join(str(n) for n in self.sequence)
                self.announcer.speak(text, config.speech_rate, partial(self._handle_speech_done, round_id))
            self._notify()
            return True

    def _handle_tick(self, round_id: int, remaining: int) -> None:
        with self._lock:
            if round_id != self.round_id:
                return
            self.time_left = remaining
            self._notify()

    def _handle_expire(self, round_id: int) -> None:
        with self._lock:
            if round_id != self.round_id or self.phase not in ACTIVE_PHASES:
                self.logger.info(f"[timer-abort] round={round_id} current={self.round_id} phase={self.phase.value}")
                return
            self.phase = RoundPhase.AWAITING_ANSWER
            self.sequence_visible = False
            self.answer_visible = True
            self.reveal_disabled = False
            self.time_left = 0
            self.logger.info(f"[timer-expire] round={round_id}")
            self._notify()

    def _handle_speech_done(self, round_id: int) -> None:
        with self._lock:
            if round_id != self.round_id or self.phase not in ACTIVE_PHASES:
                self.logger.info(f"[speech-abort] round={round_id} current={self.round_id} phase={self.phase.value}")
                return
            if self.round_config.display_enabled:
                # The countdown governs rounds that also show the sequence
                return
            self.phase = RoundPhase.AWAITING_ANSWER
            self.answer_visible = True
            self.reveal_disabled = False
            self.logger.info(f"[speech-done] round={round_id}")
            self._notify()

    # ---- answers ----

    @property
    def expected_order(self) -> Tuple[int, ...]:
        if self.round_config is not None and self.round_config.backwards:
            return tuple(reversed(self.sequence))
        return self.sequence

    def record_answer(self, index: int, raw_value: Optional[str]) -> bool:
        with self._lock:
            if self.phase not in ACTIVE_PHASES or self.answer_disabled:
                return False
            if not 0 <= index < len(self.answers):
                return False
            self.answers[index] = raw_value
            self._notify()
            return True

    def is_correct_at(self, index: int) -> bool:
        """Exact text match against the expected digit; "07" is not 7 here."""
        expected = self.expected_order
        if not 0 <= index < min(len(expected), len(self.answers)):
            return False
        return str(expected[index]) == self.answers[index]

    def count_correct_answers(self) -> int:
        """Numeric match per slot; "07" does count as 7 here."""
        return sum(
            1 for value, answer in zip(self.expected_order, self.answers)
            if parse_answer(answer) == value
        )

    def reveal(self) -> Optional[RunResult]:
        with self._lock:
            if self.phase != RoundPhase.AWAITING_ANSWER:
                self.logger.info(f"[reveal-skip] round={self.round_id} phase={self.phase.value}")
                return None
            correct = self.count_correct_answers()
            result = RunResult(total=len(self.sequence), correct=correct)
            # The round stays open for another reveal if the result cannot be saved
            self.stats.append(result)
            self.phase = RoundPhase.REVEALED
            self.sequence_visible = True
            self.answer_disabled = True
            self.reveal_disabled = True
            self.correct_answers = correct
            self.logger.info(f"[reveal] round={self.round_id} correct={result.correct}/{result.total}")
            self._notify()
            return result

    # ---- stats ----

    def reset_stats(self, confirmed: bool) -> bool:
        if not confirmed:
            return False
        with self._lock:
            self.stats.clear()
            self._notify()
            return True

    # ---- read-state ----

    def snapshot(self) -> dict:
        with self._lock:
            revealed = self.phase == RoundPhase.REVEALED
            return {
                'phase': self.phase.value,
                'round_id': self.round_id,
                'config': self.config.to_dict(),
                'round_config': self.round_config.to_dict() if self.round_config else None,
                'can_start': self.config.can_start,
                'can_configure': self.can_configure,
                'backwards_locked': self.backwards_locked,
                'sequence': list(self.sequence) if self.sequence_visible else None,
                'sequence_text': ' - '.join(str(n) for n in self.sequence) if self.sequence_visible else None,
                'answers': list(self.answers),
                'answer_correct': [self.is_correct_at(i) for i in range(len(self.answers))] if revealed else None,
                'sequence_visible': self.sequence_visible,
                'answer_visible': self.answer_visible,
                'answer_disabled': self.answer_disabled,
                'reveal_disabled': self.reveal_disabled,
                'time_left': self.time_left,
                'correct_answers': self.correct_answers,
                'total': len(self.sequence),
                'stats': self.stats.summary().to_dict(),
            }

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.snapshot())
