import pytest

from taglog.handler import Handler, HandlerStatus


class RecordingHandler(Handler):
    """Test double that remembers every call it receives."""

    def __init__(self, name="rec", calls=None, tags=None, bubble=True, fmt="%channel%:%message%"):
        super().__init__(tags=tags, fmt=fmt, bubble=bubble)
        self.name = name
        self.calls = calls if calls is not None else []
        self.queried = 0
        self.ended = 0
        self._status = HandlerStatus.READY

    def can_handle(self, tag, level):
        self.queried += 1
        return super().can_handle(tag, level)

    def handle(self, tag, record):
        raw = record.as_dict()
        self.calls.append((self.name, tag, self.render(tag, raw), raw))

    def end(self):
        if self._status == HandlerStatus.CLOSED:
            return
        self.ended += 1
        self._status = HandlerStatus.CLOSED


class ExplodingHandler(RecordingHandler):
    """Breaks the handler contract by raising from handle()."""

    def handle(self, tag, record):
        raise RuntimeError("boom")


@pytest.fixture
def calls():
    return []


@pytest.fixture
def recording(calls):
    def factory(name="rec", **kwargs):
        return RecordingHandler(name, calls=calls, **kwargs)
    return factory
