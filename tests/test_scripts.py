"""Tests for the command-line entry points."""

import json

import pytest

from esgenius.connectors.base import ConnectorError, SyncResult
from esgenius.scripts import create_test_user, seed_users, smoke_test, sync_integrations


def test_create_test_user_exits_zero(caplog):
    caplog.set_level("INFO")
    code = create_test_user.main(["--email", "cli@example.com", "--password", "cli-secret-1"])
    assert code == 0
    assert "cli@example.com" in caplog.text
    assert "cli-secret-1" not in caplog.text


def test_create_test_user_failure_exits_one(monkeypatch):
    async def _boom(session, account):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(create_test_user, "provision_user", _boom)
    assert create_test_user.main([]) == 1


def test_create_test_user_rejects_unknown_role():
    with pytest.raises(SystemExit):
        create_test_user.main(["--role", "owner"])


def test_seed_users_exits_zero():
    assert seed_users.main([]) == 0


def test_smoke_test_reports_down_server(monkeypatch):
    async def _down(base_url):
        return 1

    monkeypatch.setattr(smoke_test, "_run", _down)
    assert smoke_test.main(["--base-url", "http://127.0.0.1:9"]) == 1


def test_sync_integrations_reports_failure(monkeypatch, capsys):
    async def _pastel():
        return {"financial": {"revenue": 1.0}, "suppliers": []}

    async def _sheq():
        raise ConnectorError("SHEQ_BASE_URL is not configured")

    monkeypatch.setattr(sync_integrations, "sync_pastel", _pastel)
    monkeypatch.setattr(sync_integrations, "sync_sheq", _sheq)

    assert sync_integrations.main([]) == 1
    output = json.loads(capsys.readouterr().out)
    assert output == {"pastel": {"financial": {"revenue": 1.0}, "suppliers": []}}


def test_sync_integrations_single_source(monkeypatch, capsys):
    async def _pastel():
        return {"financial": {}, "suppliers": []}

    async def _sheq():
        raise AssertionError("sheq must not run")

    monkeypatch.setattr(sync_integrations, "sync_pastel", _pastel)
    monkeypatch.setattr(sync_integrations, "sync_sheq", _sheq)
    assert sync_integrations.main(["--pastel"]) == 0
    assert "pastel" in json.loads(capsys.readouterr().out)


def test_failed_sync_result_raises_in_script():
    ok = sync_integrations._unwrap(SyncResult(success=True, data={"revenue": 1}))
    assert ok == {"revenue": 1}
    with pytest.raises(ConnectorError) as excinfo:
        sync_integrations._unwrap(SyncResult(success=False, error="HTTP 503", status_code=503))
    assert excinfo.value.status_code == 503
