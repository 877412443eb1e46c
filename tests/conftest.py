"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def readers():
    """Three readers on the x axis at 0 m, 100 m and 200 m."""
    from ambient_iot.core.ReaderNode import ReaderNode
    return [
        ReaderNode(0, [0.0, 0.0, 0.0]),
        ReaderNode(1, [100.0, 0.0, 0.0]),
        ReaderNode(2, [200.0, 0.0, 0.0]),
    ]


class RecordingObserver:
    """Observer that keeps every event it receives."""

    def __init__(self):
        self.created = []
        self.decisions = []

    def on_device_created(self, device):
        self.created.append(device)

    def on_eligibility(self, device, now, eligible):
        self.decisions.append((device.device_id, now, eligible))


@pytest.fixture
def observer():
    return RecordingObserver()
