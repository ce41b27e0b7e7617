import pytest

from unfric.observability import client as opik_client
from unfric.observability.tracing import trace


class _FakeTrace:
    def __init__(self, **kwargs):
        self.started = kwargs
        self.ended = None

    def end(self, **kwargs):
        self.ended = kwargs


class _FakeClient:
    def __init__(self, **kwargs):
        self.config = kwargs
        self.traces = []

    def trace(self, **kwargs):
        opened = _FakeTrace(**kwargs)
        self.traces.append(opened)
        return opened


def test_trace_records_span_in_opik(monkeypatch):
    fake = _FakeClient()
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: fake)

    with trace("task.classify", metadata={"task_count": 2}, request_id="req-1") as span:
        span["classified"] = 2

    recorded = fake.traces[0]
    assert recorded.started["name"] == "task.classify"
    assert recorded.started["input"] == {"task_count": 2, "request_id": "req-1"}
    assert recorded.ended["output"] == {"status": "ok"}
    assert recorded.ended["metadata"]["classified"] == 2
    assert recorded.ended["metadata"]["duration_ms"] >= 0


def test_trace_ends_opik_trace_on_error(monkeypatch):
    fake = _FakeClient()
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: fake)

    with pytest.raises(ValueError):
        with trace("task.board"):
            raise ValueError("boom")

    assert fake.traces[0].ended["output"] == {"error": "ValueError", "message": "boom"}


def test_trace_without_client_only_logs(monkeypatch, caplog):
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: None)
    caplog.set_level("DEBUG", logger="unfric.tracing")

    with trace("schedule.timeline", metadata={"day": "2024-03-01"}):
        pass

    assert "span schedule.timeline ok" in caplog.text


def test_init_opik_disabled_returns_none(monkeypatch):
    monkeypatch.setattr(opik_client, "_initialized", False)
    monkeypatch.setattr(opik_client, "_client", None)
    monkeypatch.setattr(opik_client.settings, "opik_enabled", False)

    assert opik_client.init_opik() is None
    assert opik_client.get_opik_client() is None


def test_init_opik_enabled_builds_client_once(monkeypatch):
    monkeypatch.setattr(opik_client, "_initialized", False)
    monkeypatch.setattr(opik_client, "_client", None)
    monkeypatch.setattr(opik_client.settings, "opik_enabled", True)
    monkeypatch.setattr(opik_client.settings, "opik_project", "unfric-test")
    monkeypatch.setattr(opik_client.opik, "Opik", _FakeClient)

    first = opik_client.init_opik()
    assert isinstance(first, _FakeClient)
    assert first.config["project_name"] == "unfric-test"
    assert opik_client.get_opik_client() is first
