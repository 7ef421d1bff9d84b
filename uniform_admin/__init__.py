import os
from flask import Flask
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

load_dotenv()


def _config_name():
    name = os.environ.get("FLASK_ENV")
    if name:
        return name
    # A platform-provided PORT means we are deployed
    return "production" if os.environ.get("PORT") else "development"


def create_app(config_name=None):
    app = Flask(__name__)

    from uniform_admin.config import config_map

    config_cls = config_map.get(config_name or _config_name(), config_map["development"])
    app.config.from_object(config_cls)
    if hasattr(config_cls, "init_app"):
        config_cls.init_app(app)

    from uniform_admin.extensions import db, migrate, init_queue

    db.init_app(app)
    migrate.init_app(app, db)
    init_queue(app)

    # Models must be imported for create_all and Alembic autogenerate
    from uniform_admin.models import AuditLog, Settings  # noqa: F401

    from uniform_admin.blueprints.public import public_bp
    from uniform_admin.blueprints.admin import admin_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")

    from uniform_admin.cli import register_cli

    register_cli(app)

    @app.errorhandler(HTTPException)
    def json_http_error(e):
        if e.code is None or e.code < 400:
            return e
        # The console front end only speaks JSON
        return {"success": False, "message": e.description}, e.code

    @app.route("/health")
    def health():
        return _health(app)

    return app


def _health(app):
    from uniform_admin import extensions

    checks = {"status": "ok", "queue": extensions.task_queue.name}
    try:
        extensions.db.session.execute(extensions.db.text("SELECT 1"))
        checks["db"] = "ok"
    except Exception:
        app.logger.exception("Health check DB probe failed")
        checks["db"] = "error"
    if extensions.redis_client is None:
        checks["redis"] = "not configured"
    else:
        try:
            extensions.redis_client.ping()
            checks["redis"] = "ok"
        except Exception:
            app.logger.exception("Health check Redis probe failed")
            checks["redis"] = "error"
    if "error" in checks.values():
        checks["status"] = "degraded"
    return checks, 200 if checks["status"] == "ok" else 503
