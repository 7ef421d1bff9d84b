from uniform_admin.models.audit_log import AuditLog
from uniform_admin.models.settings import Settings

__all__ = ["AuditLog", "Settings"]
