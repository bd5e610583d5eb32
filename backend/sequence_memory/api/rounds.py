from flask import Blueprint, jsonify, request, current_app
from dataclasses import replace
from sequence_memory.services.sequence import RoundStateMachine


rounds = Blueprint('rounds', __name__)

RESET_PROMPT = 'Do you really want to reset your usage statistics?'


def _machine() -> RoundStateMachine:
    return current_app.extensions['round_machine']


def _in_steps(value: float, lo: float, step: float) -> bool:
    steps = (value - lo) / step
    return abs(steps - round(steps)) < 1e-6


def _parse_bool(data: dict, name: str):
    value = data[name]
    if not isinstance(value, bool):
        raise ValueError(f'{name} must be true or false')
    return value


def _parse_config_update(data: dict) -> dict:
    """Validate a partial config payload against the UI control bounds."""
    cfg = current_app.config
    changes = {}

    if 'sequence_length' in data:
        try:
            length = int(data['sequence_length'])
        except (TypeError, ValueError):
            raise ValueError('sequence_length must be an integer')
        lo, hi = cfg.get('SEQUENCE_LENGTH_MIN', 1), cfg.get('SEQUENCE_LENGTH_MAX', 14)
        if not lo <= length <= hi:
            raise ValueError(f'sequence_length must be between {lo} and {hi}')
        changes['sequence_length'] = length

    if 'memorize_seconds' in data:
        try:
            seconds = int(data['memorize_seconds'])
        except (TypeError, ValueError):
            raise ValueError('memorize_seconds must be an integer')
        lo, hi = cfg.get('MEMORIZE_SEC_MIN', 5), cfg.get('MEMORIZE_SEC_MAX', 60)
        step = cfg.get('MEMORIZE_SEC_STEP', 5)
        if not lo <= seconds <= hi or not _in_steps(seconds, lo, step):
            raise ValueError(f'memorize_seconds must be between {lo} and {hi} in steps of {step}')
        changes['memorize_seconds'] = seconds

    if 'speech_rate' in data:
        try:
            rate = float(data['speech_rate'])
        except (TypeError, ValueError):
            raise ValueError('speech_rate must be a number')
        lo, hi = cfg.get('SPEECH_RATE_MIN', 0.1), cfg.get('SPEECH_RATE_MAX', 3.0)
        step = cfg.get('SPEECH_RATE_STEP', 0.1)
        if not lo - 1e-9 <= rate <= hi + 1e-9 or not _in_steps(rate, lo, step):
            raise ValueError(f'speech_rate must be between {lo} and {hi} in steps of {step}')
        changes['speech_rate'] = round(rate, 1)

    if 'number_range' in data:
        # The range box is free text in the UI
        try:
            upper = int(str(data['number_range']).strip())
        except ValueError:
            raise ValueError('number_range must be a positive integer')
        if upper < 1:
            raise ValueError('number_range must be a positive integer')
        changes['number_range'] = upper

    for name in ('backwards', 'speak_enabled', 'display_enabled'):
        if name in data:
            changes[name] = _parse_bool(data, name)

    return changes


def _controls():
    cfg = current_app.config
    return {
        'sequence_length': {'min': cfg.get('SEQUENCE_LENGTH_MIN', 1), 'max': cfg.get('SEQUENCE_LENGTH_MAX', 14), 'step': 1},
        'memorize_seconds': {'min': cfg.get('MEMORIZE_SEC_MIN', 5), 'max': cfg.get('MEMORIZE_SEC_MAX', 60), 'step': cfg.get('MEMORIZE_SEC_STEP', 5)},
        'speech_rate': {'min': cfg.get('SPEECH_RATE_MIN', 0.1), 'max': cfg.get('SPEECH_RATE_MAX', 3.0), 'step': cfg.get('SPEECH_RATE_STEP', 0.1)},
    }


@rounds.route('/state', methods=['GET'])
def get_state():
    return jsonify(_machine().snapshot())


@rounds.route('/config', methods=['GET'])
def get_config():
    machine = _machine()
    return jsonify({
        'config': machine.config.to_dict(),
        'controls': _controls(),
        'can_configure': machine.can_configure,
        'backwards_locked': machine.backwards_locked,
    })


@rounds.route('/config', methods=['PUT'])
def update_config():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'A JSON object is required'}), 400
    machine = _machine()
    try:
        changes = _parse_config_update(data)
        config = replace(machine.config, **changes)
        config.validate()
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400

    if not machine.configure(config):
        return jsonify({'error': 'Settings can only change before a round starts or after it is revealed'}), 409
    return jsonify(machine.snapshot())


@rounds.route('/rounds', methods=['POST'])
def start_round():
    machine = _machine()
    if not machine.start_round():
        return jsonify({'error': 'Enable display or speech before generating a sequence'}), 400
    return jsonify(machine.snapshot()), 201


@rounds.route('/rounds/current/answers/<int:index>', methods=['PUT'])
def record_answer(index):
    data = request.get_json(silent=True)
    value = data.get('value') if isinstance(data, dict) else None
    if value is not None and not isinstance(value, str):
        value = str(value)
    machine = _machine()
    if not machine.record_answer(index, value):
        return jsonify({'error': 'Not accepting an answer for this slot'}), 400
    return jsonify({
        'index': index,
        'value': value,
        'answers': list(machine.answers),
    })


@rounds.route('/rounds/current/reveal', methods=['POST'])
def reveal():
    machine = _machine()
    result = machine.reveal()
    if result is None:
        return jsonify({'error': 'Nothing to reveal right now'}), 409
    payload = machine.snapshot()
    payload['result'] = result.to_dict()
    return jsonify(payload)


@rounds.route('/stats', methods=['GET'])
def get_stats():
    stats = _machine().stats
    payload = stats.summary().to_dict()
    payload['history'] = [run.to_dict() for run in stats.history]
    return jsonify(payload)


@rounds.route('/stats/reset', methods=['POST'])
def reset_stats():
    data = request.get_json(silent=True)
    confirmed = isinstance(data, dict) and data.get('confirm') is True
    machine = _machine()
    if not machine.reset_stats(confirmed):
        return jsonify({'error': 'Confirmation required', 'prompt': RESET_PROMPT}), 400
    return jsonify(machine.stats.summary().to_dict())
