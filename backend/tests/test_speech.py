from dataclasses import replace

from sequence_memory.services.sequence import SocketAnnouncer


class FakeSocket:
    def __init__(self):
        self.emitted = []

    def emit(self, event, payload, namespace=None):
        self.emitted.append((event, payload, namespace))


def test_speak_emits_utterance_for_browser():
    socket = FakeSocket()
    announcer = SocketAnnouncer(socket, lang='en-GB')
    announcer.speak('3, 1, 4', 0.8, lambda: None)

    event, payload, namespace = socket.emitted[0]
    assert event == 'speak'
    assert namespace == '/ws'
    assert payload['text'] == '3, 1, 4'
    assert payload['rate'] == 0.8
    assert payload['lang'] == 'en-GB'
    assert payload['token']


def test_unfinished_utterances_do_not_pile_up():
    socket = FakeSocket()
    announcer = SocketAnnouncer(socket)
    for _ in range(50):
        announcer.speak('1, 2', 1.0, lambda: None)
    assert announcer.pending_count == 1


def test_only_latest_utterance_completes():
    socket = FakeSocket()
    announcer = SocketAnnouncer(socket)
    done = []
    announcer.speak('1', 1.0, lambda: done.append('old'))
    announcer.speak('2', 1.0, lambda: done.append('new'))
    old_token = socket.emitted[0][1]['token']
    new_token = socket.emitted[1][1]['token']

    assert announcer.complete(old_token) is False
    assert announcer.complete(new_token) is True
    assert announcer.complete(new_token) is False
    assert done == ['new']
    assert announcer.pending_count == 0


def test_rounds_without_speech_completion_keep_one_pending(machine):
    socket = FakeSocket()
    machine.announcer = SocketAnnouncer(socket)
    machine.configure(replace(machine.config, speak_enabled=True, display_enabled=False))
    for _ in range(10):
        assert machine.start_round()
    assert machine.announcer.pending_count == 1
    assert len(socket.emitted) == 10
