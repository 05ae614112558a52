import pytest

from aeron_exporter import main as entrypoint


@pytest.fixture()
def fake_uvicorn_run(monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_missing_port_exits_non_zero(monkeypatch, fake_uvicorn_run):
    monkeypatch.delenv("AERON_EXPORTER_PORT", raising=False)
    assert entrypoint.main() == 1
    assert fake_uvicorn_run == []


def test_malformed_port_exits_non_zero(monkeypatch, fake_uvicorn_run):
    monkeypatch.setenv("AERON_EXPORTER_PORT", "port")
    assert entrypoint.main() == 1
    assert fake_uvicorn_run == []


def test_starts_server_on_configured_port(monkeypatch, tmp_path, fake_uvicorn_run):
    monkeypatch.setenv("AERON_EXPORTER_PORT", "3000")
    monkeypatch.setenv("AERON_DIR", str(tmp_path))

    assert entrypoint.main() == 0

    (app, kwargs), = fake_uvicorn_run
    assert kwargs["port"] == 3000
    assert kwargs["host"] == "0.0.0.0"
    assert app.state.cnc_file_reader.cnc_path == tmp_path / "cnc.dat"
