"""Item editor sessions.

An editor holds the add/edit form for one item together with its variant
or accessory ledger. It lives in the signed session cookie between requests
and is dropped when the admin closes it or the item is saved.
"""
import logging

from flask import current_app, session

from uniform_admin.services import item_service, note_service
from uniform_admin.services.variant_service import (
    ACCESSORIES,
    VariantSet,
    fresh_ledger,
    ledger_from_dict,
    to_number,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "item_editor"
MODES = {"add", "edit"}
ALL_EDUCATION_LEVELS = "All Education Levels"

FORM_FIELDS = (
    "name",
    "educationLevel",
    "category",
    "itemType",
    "forGender",
    "image",
    "description",
    "descriptionText",
    "material",
    "size",
    "price",
    "stock",
    "reorderPoint",
    "note",
)
NUMERIC_FIELDS = {"price", "stock", "reorderPoint"}

# The whole editor must fit in one session cookie
MAX_TEXT_LENGTH = 255
LONG_TEXT_LIMITS = {"description": 1500, "descriptionText": 1500, "image": 1024}

BLANK_FORM = {
    "name": "",
    "educationLevel": "",
    "category": "",
    "itemType": "",
    "forGender": "Unisex",
    "image": "",
    "description": "",
    "descriptionText": "",
    "material": "",
    "size": "",
    "price": 0,
    "stock": 0,
    "reorderPoint": 0,
    "note": "",
}


class EditorValidationError(ValueError):
    """Submit refused; ``errors`` maps form field to message."""

    def __init__(self, errors):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class EditorTooLargeError(ValueError):
    pass


class ItemEditor:
    def __init__(self, mode="add", item_id=None, form=None, ledger=None):
        if mode not in MODES:
            raise ValueError(f"Unknown editor mode: {mode}")
        self.mode = mode
        self.item_id = item_id
        self.form = dict(BLANK_FORM)
        self.form.update(form or {})
        self.ledger = ledger or fresh_ledger(self.form.get("itemType"))

    @classmethod
    def for_new_item(cls):
        return cls(mode="add")

    @classmethod
    def for_existing_item(cls, item):
        form = {
            field: item.get(field) if item.get(field) is not None else BLANK_FORM[field]
            for field in FORM_FIELDS
        }
        return cls(
            mode="edit",
            item_id=item.get("id"),
            form=form,
            ledger=note_service.load_ledger(item),
        )

    @property
    def is_accessory(self):
        return self.form.get("itemType") == ACCESSORIES

    # -- form fields ---------------------------------------------------

    def update_fields(self, changes):
        """Apply form field changes; unknown fields are ignored."""
        for field, value in (changes or {}).items():
            if field not in FORM_FIELDS:
                logger.debug("Ignoring unknown editor field %r", field)
                continue
            if isinstance(value, str):
                limit = LONG_TEXT_LIMITS.get(field, MAX_TEXT_LENGTH)
                if len(value) > limit:
                    raise EditorTooLargeError(f"{field} must be {limit} characters or less")
            if field == "itemType":
                self._switch_item_type(value)
            elif field == "educationLevel":
                self.form["educationLevel"] = value
                # Category is derived from the level unless set explicitly
                if "category" not in changes:
                    self.form["category"] = (
                        "All Levels" if value == ALL_EDUCATION_LEVELS else ""
                    )
            elif field in NUMERIC_FIELDS:
                self.form[field] = to_number(value)
            else:
                self.form[field] = value

    def _switch_item_type(self, item_type):
        was_accessory = self.is_accessory
        self.form["itemType"] = item_type
        if was_accessory != self.is_accessory:
            self.ledger = fresh_ledger(item_type)

    # -- rows ----------------------------------------------------------

    def add_row(self):
        return self.ledger.add_row()

    def remove_row(self, index):
        removed = self.ledger.remove_row(index)
        if removed and isinstance(self.ledger, VariantSet):
            self.form["size"] = self.ledger.size_string() or note_service.NO_SIZE
        return removed

    def set_row(self, index, label=None, stock=None, price=None):
        """Edit one row. Raises IndexError for an unknown row."""
        if label is not None:
            if not isinstance(self.ledger, VariantSet):
                raise ValueError("Accessory entries have no size label.")
            self.ledger.set_label(index, label)
        if stock is not None:
            self.ledger.set_stock(index, stock)
        if price is not None:
            self.ledger.set_price(index, price)
            # The first selected row is the item's representative price
            if index == self.ledger.first_selected():
                self.form["price"] = to_number(price)

    def toggle_row(self, index, checked):
        self.ledger.select(index, checked)
        if not isinstance(self.ledger, VariantSet):
            return
        size = self.ledger.size_string()
        if checked:
            if size:
                self.form["size"] = size
        else:
            self.form["size"] = size or note_service.NO_SIZE

    # -- submit --------------------------------------------------------

    def validate(self):
        errors = {}
        form = self.form
        if not form.get("educationLevel"):
            errors["educationLevel"] = "Education level is required"
        elif (
            form["educationLevel"] != ALL_EDUCATION_LEVELS
            and not (form.get("name") or "").strip()
        ):
            errors["name"] = (
                "Item name is required when education level is not "
                "All Education Levels"
            )
        if not form.get("itemType"):
            errors["itemType"] = "Item type is required"
        if to_number(form.get("stock")) < 0:
            errors["stock"] = "Stock cannot be negative"
        if to_number(form.get("price")) < 0:
            errors["price"] = "Price cannot be negative"
        for i in self.ledger.selected_indices:
            row = self.ledger.rows[i]
            if to_number(row.stock) < 0 or to_number(row.price) < 0:
                errors[f"rows.{i}"] = "Stock and price cannot be negative"
        return errors

    def build_item(self):
        """Outgoing item payload. Raises EditorValidationError."""
        errors = self.validate()
        if errors:
            raise EditorValidationError(errors)
        item = note_service.build_item(self.form, self.ledger)
        if self.mode == "edit":
            item["id"] = self.item_id
        return item

    def state(self):
        """JSON view for the console front end."""
        rows = []
        for i, row in enumerate(self.ledger.rows):
            entry = {
                "index": i,
                "stock": row.stock,
                "price": row.price,
                "selected": row.selected,
            }
            if isinstance(self.ledger, VariantSet):
                entry["label"] = row.label
                entry["placeholder"] = self.ledger.effective_label(i)
            rows.append(entry)
        state = {
            "mode": self.mode,
            "itemId": self.item_id,
            "kind": self.ledger.kind,
            "form": dict(self.form),
            "rows": rows,
            "totalStock": self.ledger.total_stock(),
        }
        if isinstance(self.ledger, VariantSet):
            state["sizeChoices"] = self.ledger.size_string() or note_service.NO_SIZE
        return state

    # -- session storage -----------------------------------------------

    def to_dict(self):
        return {
            "mode": self.mode,
            "itemId": self.item_id,
            "form": dict(self.form),
            "ledger": self.ledger.to_dict(),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            mode=data.get("mode", "add"),
            item_id=data.get("itemId"),
            form=data.get("form"),
            ledger=ledger_from_dict(data.get("ledger")),
        )


def load_editor():
    data = session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return ItemEditor.from_dict(data)
    except (ValueError, TypeError):
        logger.warning("Discarding unreadable editor session")
        discard_editor()
        return None


def _cookie_length(data):
    """Length of the session cookie that would carry ``data``."""
    interface = current_app.session_interface
    serializer = getattr(interface, "get_signing_serializer", lambda app: None)(current_app)
    if serializer is None:
        return 0
    return len(current_app.config["SESSION_COOKIE_NAME"]) + 1 + len(serializer.dumps(data))


def save_editor(editor):
    """Store the editor in the session.

    Raises EditorTooLargeError instead of writing a cookie the browser would
    drop; the previously stored editor is left as it was.
    """
    data = editor.to_dict()
    candidate = dict(session)
    candidate[SESSION_KEY] = data
    limit = current_app.config.get("MAX_COOKIE_SIZE") or 0
    if limit and _cookie_length(candidate) > limit:
        logger.warning("Item editor for %s exceeds the %d byte cookie", editor.item_id, limit)
        raise EditorTooLargeError(
            "Item editor is too large to keep open; shorten the description or remove rows"
        )
    session[SESSION_KEY] = data


def discard_editor():
    session.pop(SESSION_KEY, None)


def open_editor(mode, item_id=None):
    """Start an editor; edit mode loads the item from the backend.

    Returns None when the item to edit does not exist.
    """
    if mode == "edit":
        item = item_service.get_item(item_id)
        if item is None:
            return None
        editor = ItemEditor.for_existing_item(item)
    elif mode == "add":
        editor = ItemEditor.for_new_item()
    else:
        raise ValueError(f"Unknown editor mode: {mode}")
    try:
        save_editor(editor)
    except EditorTooLargeError:
        discard_editor()
        raise
    return editor


def submit_editor(editor, admin_id):
    """Save the edited item through the backend and close the editor."""
    item = editor.build_item()
    if editor.mode == "edit":
        saved = item_service.update_item(editor.item_id, item, admin_id)
    else:
        saved = item_service.create_item(item, admin_id)
    discard_editor()
    return saved
