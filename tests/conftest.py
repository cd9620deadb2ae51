import os
import sys

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


class FakeSource:
    """Scripted SampleSource: pops one value per read, repeating the last."""

    def __init__(self, cpu=(0.0,), memory=(0.0,), counters=((0.0, 0.0),)):
        self.cpu = list(cpu)
        self.memory = list(memory)
        self.counters = list(counters)

    @staticmethod
    def _next(values):
        return values.pop(0) if len(values) > 1 else values[0]

    def read_cpu_usage(self):
        return self._next(self.cpu)

    def read_memory_usage(self):
        return self._next(self.memory)

    def read_network_counters(self):
        return self._next(self.counters)


@pytest.fixture
def fake_source():
    return FakeSource
