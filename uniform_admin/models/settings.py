import json
from datetime import datetime, timezone
from uniform_admin.extensions import db


DEFAULT_SUGGESTED_SIZES = [
    "XSmall (XS)",
    "Small (S)",
    "Medium (M)",
    "Large (L)",
    "XLarge (XL)",
    "2XLarge (2XL)",
    "3XLarge (3XL)",
    "N/A",
]
MAX_SUGGESTED_SIZES = 20


class Settings(db.Model):
    __tablename__ = "settings"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @staticmethod
    def get(key, default=None):
        row = db.session.get(Settings, key)
        return row.value if row else default

    @staticmethod
    def set(key, value):
        row = db.session.get(Settings, key)
        if row:
            row.value = str(value)
        else:
            row = Settings(key=key, value=str(value))
            db.session.add(row)
        db.session.commit()
        return row

    @staticmethod
    def get_suggested_sizes():
        """Return the size labels offered by the item editor."""
        raw = Settings.get("suggested_sizes")
        if raw is None:
            return list(DEFAULT_SUGGESTED_SIZES)
        try:
            sizes = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return list(DEFAULT_SUGGESTED_SIZES)
        return [s for s in sizes if isinstance(s, str)]

    @staticmethod
    def _normalize_size_label(label):
        if not label or not isinstance(label, str):
            raise ValueError("Size label is required.")
        candidate = " ".join(label.split())
        if len(candidate) > 40:
            raise ValueError("Size label must be at most 40 characters.")
        return candidate

    @staticmethod
    def add_suggested_size(label):
        """Append a size label. Max 20 labels, duplicates ignored."""
        sizes = Settings.get_suggested_sizes()
        label = Settings._normalize_size_label(label)
        if label.lower() in (s.lower() for s in sizes):
            return sizes
        if len(sizes) >= MAX_SUGGESTED_SIZES:
            raise ValueError(f"At most {MAX_SUGGESTED_SIZES} suggested sizes.")
        sizes.append(label)
        Settings.set("suggested_sizes", json.dumps(sizes))
        return sizes

    @staticmethod
    def remove_suggested_size(label_or_index):
        """Remove by exact label (case-insensitive) or 1-based index."""
        sizes = Settings.get_suggested_sizes()
        try:
            idx = int(label_or_index) - 1
            if 0 <= idx < len(sizes):
                removed = sizes.pop(idx)
                Settings.set("suggested_sizes", json.dumps(sizes))
                return removed
        except (ValueError, TypeError):
            pass
        wanted = str(label_or_index).strip().lower()
        for i, s in enumerate(sizes):
            if s.lower() == wanted:
                removed = sizes.pop(i)
                Settings.set("suggested_sizes", json.dumps(sizes))
                return removed
        return None

    def __repr__(self):
        return f"<Settings {self.key}={self.value}>"
