import pytest

from watchful import Eventful, observable


class RecordingEventful(Eventful):
    """
    Emitter that keeps track of everything that was emitted through it.
    """

    def __init__(self):
        super().__init__()
        self.emitted = []

    def emit(self, name, payload=None):
        self.emitted.append((name, payload))
        super().emit(name, payload)


@pytest.fixture
def record():
    """
    Returns a function that creates a handle for the given value together
    with the list of (name, payload) tuples emitted by that handle.
    """

    def record(value):
        handle = observable(value, eventful=RecordingEventful)
        return handle, handle.__eventful__.emitted

    return record


@pytest.fixture
def names():
    """
    Returns a function that strips the payloads from recorded emissions.
    """

    def names(emitted):
        return [name for name, _ in emitted]

    return names
