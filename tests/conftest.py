import os

import pytest

# Ensure logger writes to a temp folder within tests
os.environ.setdefault("LOG_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "_logs"))

from tgnet.net import happy_eyeballs


@pytest.fixture(autouse=True)
def restore_urllib3_create_connection():
    original = happy_eyeballs.urllib3_connection.create_connection
    yield
    happy_eyeballs.urllib3_connection.create_connection = original


class Recorder:
    """Callable that remembers every call it receives."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.result


@pytest.fixture
def recorder():
    return Recorder
