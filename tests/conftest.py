"""
Shared fixtures: a scripted executor standing in for a node's shell, and a
fake clock for the wait loops.
"""
from typing import Callable, List, Optional, Tuple, Union
import pytest
from remotefs.libs.config import RemoteFSConfig
from remotefs.services.gluster import GlusterService
from remotefs.services.node import NodeService
from remotefs.services.storage import StorageService

Response = Tuple[Optional[str], Optional[int]]


class FakeExecutor:
    """Answers commands by substring; the most recently registered match wins."""
    def __init__(self):
        self.rules: List[Tuple[str, Union[Response, Callable[[str], Response]]]] = []
        self.commands: List[str] = []

    def respond(self, substring: str, output: Optional[str] = "", exit_code: Optional[int] = 0):
        self.rules.append((substring, (output, exit_code)))
        return self

    def respond_with(self, substring: str, handler: Callable[[str], Response]):
        self.rules.append((substring, handler))
        return self

    def respond_sequence(self, substring: str, responses: List[Response]):
        """Answer with each response in turn, repeating the last one."""
        remaining = list(responses)

        def handler(_command):
            return remaining.pop(0) if len(remaining) > 1 else remaining[0]
        return self.respond_with(substring, handler)

    def execute(self, command: str, timeout: Optional[int] = None) -> Response:
        self.commands.append(command)
        for substring, response in reversed(self.rules):
            if substring in command:
                return response(command) if callable(response) else response
        return "", 0

    def ran(self, substring: str) -> List[str]:
        return [command for command in self.commands if substring in command]

    def disconnect(self):
        pass


class FakeClock:
    """Monotonic clock advanced only by sleep()"""
    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def node(executor):
    return NodeService(executor)


@pytest.fixture
def storage(node):
    return StorageService(node)


@pytest.fixture
def gluster(node):
    return GlusterService(node)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cfg():
    return RemoteFSConfig.from_dict({})
