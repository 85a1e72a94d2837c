"""Shared fixtures: an in-memory provider directory."""

import os
import sys
import time

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from internal.atlas.client import DirectoryUnavailableError
from internal.atlas.types import Provider


class FakeDirectory:
    """Provider directory serving fixed providers.

    ``delay`` makes every fetch slow; a fetch given a shorter ``timeout``
    gives up after that timeout, like the live client does.
    """

    def __init__(self, providers, fail_on=(), delay=0.0):
        self.providers = {p.name: p for p in providers}
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls = []
        self.timeouts = []

    def get_provider(self, name, timeout=None):
        self.calls.append(name)
        self.timeouts.append(timeout)
        if self.delay:
            if timeout is not None and timeout < self.delay:
                time.sleep(timeout)
                raise DirectoryUnavailableError(f"timed out fetching {name}")
            time.sleep(self.delay)
        if name in self.fail_on or name not in self.providers:
            raise DirectoryUnavailableError(f"cannot fetch {name}")
        return self.providers[name]


def default_providers():
    return [
        Provider.with_sizes("AWS", ["M10", "M20", "M30"]),
        Provider.with_sizes("GCP", ["M10", "M40"]),
        Provider.with_sizes("AZURE", ["M10", "M200"]),
    ]


@pytest.fixture
def make_directory():
    """Build a FakeDirectory; providers default to AWS, GCP and AZURE."""
    def _make(providers=None, **kwargs):
        return FakeDirectory(default_providers() if providers is None else providers, **kwargs)
    return _make
