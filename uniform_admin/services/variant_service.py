"""Variant rows, per-row stock/price ledger and row selection.

Each ledger is one ordered list of ``LedgerRow`` records. The ``values``,
``stocks``, ``prices`` and ``selected`` views are derived from that list, so
they always have matching lengths.

Two kinds exist:

- ``VariantSet`` for sized items (uniforms): rows carry a size label.
- ``AccessoryLedger`` for accessories: rows carry only stock and price.
"""
import math

SIZE_VARIATIONS = "sizeVariations"
ACCESSORY_ENTRIES = "accessoryEntries"

ACCESSORIES = "Accessories"
DEFAULT_SIZE_LABELS = ("Small (S)", "Medium (M)")


def to_number(value):
    """Coerce form text to a number.

    Blank, non-numeric, NaN and infinite input become 0. Integral values
    come back as ``int`` so they serialize as ``5`` rather than ``5.0``.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number) if number.is_integer() else number


def to_text(value):
    """Render a stored number back into form text ("5", "99.5", "")."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class LedgerRow:
    """One ledger row.

    ``beginning_inventory`` is the stock recorded when the size was first
    saved; None marks a row that has not been saved yet.
    """

    __slots__ = ("label", "stock", "price", "selected", "beginning_inventory")

    def __init__(self, label="", stock="", price="", selected=False, beginning_inventory=None):
        self.label = label
        self.stock = stock
        self.price = price
        self.selected = selected
        self.beginning_inventory = beginning_inventory

    def to_list(self):
        return [self.label, self.stock, self.price, self.selected, self.beginning_inventory]

    def __eq__(self, other):
        return isinstance(other, LedgerRow) and self.to_list() == other.to_list()

    def __repr__(self):
        mark = "x" if self.selected else " "
        return f"<Row [{mark}] {self.label!r} stock={self.stock!r} price={self.price!r}>"


class Ledger:
    """Ordered rows with a selection. Subclasses set ``kind`` and ``min_rows``."""

    kind = None
    min_rows = 1

    def __init__(self, rows):
        self.rows = list(rows)

    # -- views ---------------------------------------------------------

    @property
    def stocks(self):
        return [row.stock for row in self.rows]

    @property
    def prices(self):
        return [row.price for row in self.rows]

    @property
    def selected(self):
        return {i for i, row in enumerate(self.rows) if row.selected}

    @property
    def selected_indices(self):
        return [i for i, row in enumerate(self.rows) if row.selected]

    def first_selected(self):
        """Index of the representative row, or None with no selection."""
        for i, row in enumerate(self.rows):
            if row.selected:
                return i
        return None

    def __len__(self):
        return len(self.rows)

    # -- row synchronization ------------------------------------------

    def add_row(self):
        """Append a blank row and return its index."""
        self.rows.append(LedgerRow())
        return len(self.rows) - 1

    def remove_row(self, index):
        """Remove the row at ``index``.

        Refused (returns False) when it is the last remaining row or the
        index is out of range. A selection left empty falls back to row 0.
        """
        if len(self.rows) <= 1 or not 0 <= index < len(self.rows):
            return False
        del self.rows[index]
        self._ensure_selection()
        return True

    def set_stock(self, index, value):
        self._row(index).stock = _as_field(value)

    def set_price(self, index, value):
        self._row(index).price = _as_field(value)

    # -- selection -----------------------------------------------------

    def select(self, index, checked=True):
        """Check or uncheck a row; an emptied selection falls back to row 0."""
        self._row(index).selected = bool(checked)
        self._ensure_selection()

    def total_stock(self):
        return sum(to_number(row.stock) for row in self.rows if row.selected)

    def _ensure_selection(self):
        if self.rows and not any(row.selected for row in self.rows):
            self.rows[0].selected = True

    def _row(self, index):
        if not 0 <= index < len(self.rows):
            raise IndexError(f"Row {index} out of range (0..{len(self.rows) - 1})")
        return self.rows[index]

    # -- persistence in the editor session ----------------------------

    def to_dict(self):
        return {"kind": self.kind, "rows": [row.to_list() for row in self.rows]}

    def __eq__(self, other):
        return type(self) is type(other) and self.rows == other.rows

    def __repr__(self):
        return f"<{type(self).__name__} {self.rows!r}>"


class VariantSet(Ledger):
    kind = SIZE_VARIATIONS
    min_rows = 2

    @classmethod
    def fresh(cls):
        return cls([LedgerRow(selected=True), LedgerRow()])

    @classmethod
    def from_lists(cls, values, stocks=None, prices=None, selected=()):
        """Build from parallel lists; short stock/price lists are padded."""
        stocks = list(stocks or [])
        prices = list(prices or [])
        picked = set(selected)
        rows = []
        for i, label in enumerate(values):
            rows.append(
                LedgerRow(
                    label=_as_field(label),
                    stock=_as_field(stocks[i]) if i < len(stocks) else "",
                    price=_as_field(prices[i]) if i < len(prices) else "",
                    selected=i in picked,
                )
            )
        return cls(rows)

    @property
    def values(self):
        return [row.label for row in self.rows]

    def set_label(self, index, value):
        row = self._row(index)
        before = self.effective_label(index)
        row.label = _as_field(value)
        # A relabelled row is a different size; its saved count no longer applies
        if self.effective_label(index) != before:
            row.beginning_inventory = None

    def effective_label(self, index):
        """Trimmed label, or the built-in default for the first two rows."""
        label = (self.rows[index].label or "").strip()
        if label:
            return label
        if index < len(DEFAULT_SIZE_LABELS):
            return DEFAULT_SIZE_LABELS[index]
        return ""

    def size_string(self):
        """Comma-joined labels of the selected rows (blank labels dropped)."""
        labels = (self.effective_label(i) for i in self.selected_indices)
        return ", ".join(label for label in labels if label)


class AccessoryLedger(Ledger):
    kind = ACCESSORY_ENTRIES
    min_rows = 1

    @classmethod
    def fresh(cls):
        return cls([LedgerRow(selected=True)])

    @classmethod
    def from_lists(cls, stocks, prices=None, selected=()):
        prices = list(prices or [])
        picked = set(selected)
        return cls(
            LedgerRow(
                stock=_as_field(stock),
                price=_as_field(prices[i]) if i < len(prices) else "",
                selected=i in picked,
            )
            for i, stock in enumerate(stocks)
        )

    def add_row(self):
        # New accessory entries are included straight away
        index = super().add_row()
        self.rows[index].selected = True
        return index


def fresh_ledger(item_type):
    """Blank ledger for an item type."""
    if item_type == ACCESSORIES:
        return AccessoryLedger.fresh()
    return VariantSet.fresh()


def ledger_from_dict(data):
    """Restore a ledger saved with ``Ledger.to_dict``."""
    kinds = {SIZE_VARIATIONS: VariantSet, ACCESSORY_ENTRIES: AccessoryLedger}
    cls = kinds.get((data or {}).get("kind"))
    if cls is None:
        raise ValueError(f"Unknown ledger kind: {(data or {}).get('kind')!r}")
    rows = []
    for saved in data.get("rows", []):
        label, stock, price, selected = saved[:4]
        beginning = saved[4] if len(saved) > 4 else None
        rows.append(
            LedgerRow(
                label=label,
                stock=stock,
                price=price,
                selected=bool(selected),
                beginning_inventory=beginning,
            )
        )
    if not rows:
        return cls.fresh()
    return cls(rows)


def _as_field(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return to_text(value)
