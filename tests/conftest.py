import pytest
from typing import Any, List, Tuple

from fall_core.host import Host
from fall_core.item import IdItem


class RecordingHost(Host):
    """Host double that records every call in order."""

    def __init__(self):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    async def call(self, fn, *args):
        self.calls.append((fn, args))
        return 0

    async def cmd(self, command):
        self.calls.append(("cmd", (command,)))


async def drain(stream) -> List[IdItem]:
    return [item async for item in stream]


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def collect_all():
    return drain
