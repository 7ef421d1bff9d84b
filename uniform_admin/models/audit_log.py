from datetime import datetime, timezone
from uniform_admin.extensions import db


class AuditLog(db.Model):
    __tablename__ = "audit_log"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.String(64), nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False)
    target_type = db.Column(db.String(30))  # item, user, student, role, maintenance
    target_id = db.Column(db.String(64), index=True)
    payload = db.Column(db.JSON)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    ACTIONS = {
        "CREATE_ITEM",
        "UPDATE_ITEM",
        "DELETE_ITEM",
        "UPLOAD_ITEM_IMAGE",
        "PRE_ORDER_MATCH",
        "CREATE_USER",
        "UPDATE_USER",
        "DISABLE_USER",
        "BULK_UPDATE_USERS",
        "CREATE_STUDENT",
        "UPDATE_STUDENT",
        "ASSIGN_PERMISSION",
        "REMOVE_PERMISSION",
        "SET_ROLE_STATUS",
        "UPDATE_MAINTENANCE",
        "ADD_SIZE",
        "REMOVE_SIZE",
    }

    @staticmethod
    def record(admin_id, action, target_type=None, target_id=None, payload=None):
        """Stage an audit row in the current session (caller commits)."""
        if action not in AuditLog.ACTIONS:
            raise ValueError(f"Unknown audit action: {action}")
        entry = AuditLog(
            admin_id=str(admin_id),
            action=action,
            target_type=target_type,
            target_id=str(target_id) if target_id is not None else None,
            payload=payload,
        )
        db.session.add(entry)
        return entry

    def to_dict(self):
        return {
            "id": self.id,
            "adminId": self.admin_id,
            "action": self.action,
            "targetType": self.target_type,
            "targetId": self.target_id,
            "payload": self.payload,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<AuditLog {self.action} by {self.admin_id}>"
