"""Flask CLI commands for admin operations."""
import json
import click


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables and seed default settings."""
        from uniform_admin.extensions import db
        from uniform_admin.models.settings import Settings, DEFAULT_SUGGESTED_SIZES

        db.create_all()

        if Settings.get("suggested_sizes") is None:
            db.session.add(
                Settings(key="suggested_sizes", value=json.dumps(DEFAULT_SUGGESTED_SIZES))
            )
        db.session.commit()

        click.echo("Database initialized with default settings.")

    @app.cli.command("list-sizes")
    def list_sizes():
        """Show the suggested size labels offered by the item editor."""
        from uniform_admin.models.settings import Settings

        for i, label in enumerate(Settings.get_suggested_sizes(), start=1):
            click.echo(f"{i:>2}. {label}")

    @app.cli.command("add-size")
    @click.argument("label")
    @click.option("--admin", "admin_id", default="cli", help="Admin ID for the audit log")
    def add_size(label, admin_id):
        """Add a suggested size label."""
        from uniform_admin.extensions import db
        from uniform_admin.models.audit_log import AuditLog
        from uniform_admin.models.settings import Settings

        try:
            sizes = Settings.add_suggested_size(label)
        except ValueError as e:
            raise click.ClickException(str(e))
        AuditLog.record(admin_id, "ADD_SIZE", target_type="settings", payload={"label": label})
        db.session.commit()
        click.echo(f"Suggested sizes: {', '.join(sizes)}")

    @app.cli.command("remove-size")
    @click.argument("label_or_index")
    @click.option("--admin", "admin_id", default="cli", help="Admin ID for the audit log")
    def remove_size(label_or_index, admin_id):
        """Remove a suggested size by label or 1-based position."""
        from uniform_admin.extensions import db
        from uniform_admin.models.audit_log import AuditLog
        from uniform_admin.models.settings import Settings

        removed = Settings.remove_suggested_size(label_or_index)
        if removed is None:
            raise click.ClickException(f"No suggested size matches {label_or_index!r}")
        AuditLog.record(
            admin_id, "REMOVE_SIZE", target_type="settings", payload={"label": removed}
        )
        db.session.commit()
        click.echo(f"Removed: {removed}")

    @app.cli.command("audit-tail")
    @click.option("--limit", default=20, type=int, help="Number of entries")
    @click.option("--action", default=None, help="Only this action")
    def audit_tail(limit, action):
        """Show the most recent console actions."""
        from uniform_admin.services.audit_service import list_console_actions

        page = list_console_actions(action=action, per_page=limit)
        if not page.items:
            click.echo("No audit entries.")
            return
        for entry in page.items:
            target = f"{entry.target_type}:{entry.target_id}" if entry.target_type else "-"
            stamp = entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else "?"
            click.echo(f"{stamp}  {entry.admin_id:<12} {entry.action:<20} {target}")

    @app.cli.command("stats")
    def stats():
        """Show console action statistics."""
        from uniform_admin.services.audit_service import get_stats

        s = get_stats()
        total = sum(s.values())
        click.echo(f"Total actions: {total}")
        for action, count in sorted(s.items()):
            click.echo(f"  {action}: {count}")
