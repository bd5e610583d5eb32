"""Sequence memory domain services: generation, countdown, scoring, stats.

The round machine and its collaborators are plain Python; HTTP routes and
socket handlers reach them through ``app.extensions['round_machine']``,
keeping transport concerns separated from the game mechanics.
"""

from .domain import RoundConfig, RoundPhase, RunResult, StatsSummary
from .generator import RandomSequenceGenerator
from .machine import RoundStateMachine, parse_answer
from .speech import SocketAnnouncer, SpeechAnnouncer
from .stats import StatsStore, aggregate
from .storage import DatabaseStorage, MemoryStorage
from .timer import RoundTimer

__all__ = [
    "RoundConfig",
    "RoundPhase",
    "RunResult",
    "StatsSummary",
    "RandomSequenceGenerator",
    "RoundStateMachine",
    "parse_answer",
    "SpeechAnnouncer",
    "SocketAnnouncer",
    "StatsStore",
    "aggregate",
    "DatabaseStorage",
    "MemoryStorage",
    "RoundTimer",
    "build_round_machine",
]


def default_round_config(app) -> RoundConfig:
    cfg = app.config
    config = RoundConfig(
        sequence_length=int(cfg.get('DEFAULT_SEQUENCE_LENGTH', 6)),
        memorize_seconds=int(cfg.get('DEFAULT_MEMORIZE_SEC', 5)),
        number_range=int(cfg.get('DEFAULT_NUMBER_RANGE', 9)),
        speech_rate=float(cfg.get('DEFAULT_SPEECH_RATE', 1.0)),
    )
    config.validate()
    return config


def build_round_machine(app, generator=None, timer=None, announcer=None, storage=None) -> RoundStateMachine:
    """Wire a round machine for ``app`` and register it on ``app.extensions``.

    Collaborators default to the production ones: random digits, a Socket.IO
    driven countdown, browser speech and the ``key_value`` table. The run
    history is loaded before the machine is returned.
    """
    from sequence_memory import socketio

    cfg = app.config
    stats = StatsStore(
        storage if storage is not None else DatabaseStorage(app),
        key=cfg.get('STATS_STORAGE_KEY', 'stats'),
        logger=app.logger,
    )
    if announcer is None:
        announcer = SocketAnnouncer(socketio, lang=cfg.get('SPEECH_VOICE_LANG', 'en-US'), logger=app.logger)
    if timer is None:
        timer = RoundTimer(interval=float(cfg.get('TIMER_INTERVAL_SEC', 1)))

    def _emit_state(state: dict) -> None:
        socketio.emit('state_update', state, namespace='/ws')

    machine = RoundStateMachine(
        generator=generator or RandomSequenceGenerator(),
        timer=timer,
        stats=stats,
        announcer=announcer,
        config=default_round_config(app),
        logger=app.logger,
        on_change=_emit_state,
    )
    stats.load()
    app.extensions['round_machine'] = machine
    app.extensions['speech_announcer'] = announcer
    return machine
