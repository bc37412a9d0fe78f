import pytest

import run
from storefront.config import resolve_port


def test_port_defaults_to_3000():
    assert resolve_port({}) == 3000
    assert resolve_port({"PORT": ""}) == 3000


def test_port_from_environment():
    assert resolve_port({"PORT": "8080"}) == 8080


def test_port_must_be_numeric():
    with pytest.raises(ValueError):
        resolve_port({"PORT": "http"})


def _fake_server(app, monkeypatch, error=None):
    calls = {}

    def fake_run(host=None, port=None, **kwargs):
        calls.update(host=host, port=port, **kwargs)
        if error:
            raise error

    monkeypatch.setattr(app, "run", fake_run)
    monkeypatch.setattr(run, "create_app", lambda: app)
    return calls


def test_main_listens_on_default_port(app, monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    calls = _fake_server(app, monkeypatch)
    run.main()
    assert calls["port"] == 3000
    assert calls["threaded"] is True


def test_main_listens_on_configured_port(app, monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    calls = _fake_server(app, monkeypatch)
    run.main()
    assert calls["port"] == 8080


def test_main_exits_when_port_is_unavailable(app, monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    _fake_server(app, monkeypatch, error=OSError(98, "Address already in use"))
    with pytest.raises(SystemExit) as excinfo:
        run.main()
    assert excinfo.value.code == 1
