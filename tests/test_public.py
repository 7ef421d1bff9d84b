"""Tests for health, access control and the CLI."""
import json

from uniform_admin import extensions
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.models.settings import Settings


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "ok"
    assert data["redis"] == "not configured"
    assert data["queue"] == "disabled"


def test_unknown_route_is_json(client):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_health_does_not_leak_internal_errors(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database password leaked")

    monkeypatch.setattr(extensions.db.session, "execute", boom)

    resp = client.get("/health")
    assert resp.status_code == 503
    data = resp.get_json()
    assert data["db"] == "error"
    assert "password" not in str(data).lower()


def test_admin_rejects_wrong_token(client):
    resp = client.get("/admin/roles", headers={"X-Admin-Token": "guess"})
    assert resp.status_code == 403
    assert resp.get_json()["success"] is False


def test_admin_id_defaults_to_console(client, db, backend, envelope):
    backend.return_value = envelope(None)
    client.put(
        "/admin/roles/staff/status",
        json={"isActive": False},
        headers={"X-Admin-Token": "test-admin-token"},
    )
    assert AuditLog.query.filter_by(action="SET_ROLE_STATUS").one().admin_id == "console"


def test_cli_init_db_seeds_sizes(app, db):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert json.loads(Settings.get("suggested_sizes"))[0] == "XSmall (XS)"


def test_cli_add_and_remove_size(app, db):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["add-size", "Petite (P)", "--admin", "ops"])
    assert result.exit_code == 0
    assert "Petite (P)" in result.output

    result = runner.invoke(args=["remove-size", "petite (p)"])
    assert result.exit_code == 0
    assert "Removed: Petite (P)" in result.output

    result = runner.invoke(args=["remove-size", "Giant"])
    assert result.exit_code != 0

    actions = [e.action for e in AuditLog.query.order_by(AuditLog.id)]
    assert actions == ["ADD_SIZE", "REMOVE_SIZE"]
    assert AuditLog.query.order_by(AuditLog.id).first().admin_id == "ops"


def test_cli_list_sizes_and_stats(app, db):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["list-sizes"])
    assert " 1. XSmall (XS)" in result.output

    AuditLog.record("a", "CREATE_ITEM")
    db.session.commit()
    result = runner.invoke(args=["stats"])
    assert "Total actions: 1" in result.output
    assert "CREATE_ITEM: 1" in result.output

    result = runner.invoke(args=["audit-tail", "--limit", "5"])
    assert "CREATE_ITEM" in result.output
