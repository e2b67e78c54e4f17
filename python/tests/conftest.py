import io
import json

import pytest

from tradelog import diagnostics


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def read_entries(stream):
    def _read():
        return [json.loads(line) for line in stream.getvalue().splitlines()]
    return _read


@pytest.fixture
def no_build_info(monkeypatch):
    monkeypatch.setattr(diagnostics, "read_build_info", lambda distribution: None)


@pytest.fixture
def fake_build_info(monkeypatch):
    info = diagnostics.BuildInfo(name="order-router", version="1.2.3", requires=("structlog>=22.1",))
    monkeypatch.setattr(diagnostics, "read_build_info", lambda distribution: info)
    return info
