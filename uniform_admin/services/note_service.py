"""Item ``note`` side-channel: serialize ledgers into it and read them back.

The backend stores variant data as JSON inside the item's free-text ``note``
column, tagged with a ``_type`` discriminator::

    {"_type": "sizeVariations", "sizeVariations": [
        {"size": "Small (S)", "stock": 5, "price": 100, "beginning_inventory": 5}]}
    {"_type": "accessoryEntries", "accessoryEntries": [{"stock": 10, "price": 50}]}

Anything else in ``note`` is a plain display note.
"""
import json
import logging
import re

from uniform_admin.services.variant_service import (
    ACCESSORIES,
    ACCESSORY_ENTRIES,
    DEFAULT_SIZE_LABELS,
    SIZE_VARIATIONS,
    AccessoryLedger,
    LedgerRow,
    VariantSet,
    to_number,
    to_text,
)

logger = logging.getLogger(__name__)

NO_SIZE = "N/A"
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*")


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------

def size_key(size):
    """Comparison key for size labels: "Small (S)" and "small" are one size."""
    return _PARENTHETICAL.sub("", (size or "").strip().lower()).strip()


def variant_entries(variants, fallback_price=None):
    """Wire entries for the selected rows of a VariantSet, in row order.

    Rows naming the same size are merged: stocks add up, the first row's
    label, price and beginning inventory are kept.
    """
    merged = {}
    for i in variants.selected_indices:
        row = variants.rows[i]
        stock = to_number(row.stock)
        price = to_number(row.price) or to_number(fallback_price)
        size = variants.effective_label(i)
        if not size and (stock or price):
            size = f"Size {i + 1}"
        if not size:
            continue
        key = size_key(size)
        if key in merged:
            merged[key]["stock"] += stock
            continue
        beginning = row.beginning_inventory
        merged[key] = {
            "size": size,
            "stock": stock,
            "price": price,
            "beginning_inventory": stock if beginning is None else to_number(beginning),
        }
    return list(merged.values())


def accessory_entries(accessories, fallback_price=None):
    """Wire entries for the selected rows of an AccessoryLedger."""
    return [
        {
            "stock": to_number(accessories.rows[i].stock),
            "price": to_number(accessories.rows[i].price) or to_number(fallback_price),
        }
        for i in accessories.selected_indices
    ]


def dump_note(kind, entries):
    """Compact JSON with the ``_type`` tag first."""
    return json.dumps(
        {"_type": kind, kind: entries}, separators=(",", ":"), ensure_ascii=False
    )


def serialize(ledger, fallback_price=None):
    """Serialize a ledger into the tagged ``note`` string."""
    if isinstance(ledger, AccessoryLedger):
        return dump_note(ACCESSORY_ENTRIES, accessory_entries(ledger, fallback_price))
    return dump_note(SIZE_VARIATIONS, variant_entries(ledger, fallback_price))


def build_item(form, ledger):
    """Outgoing item: form fields plus aggregate size/stock/price and note.

    ``form["price"]`` is the fallback price for rows without their own.
    Accessory items carry no ``size`` key.
    """
    fallback_price = form.get("price")
    item = dict(form)

    if isinstance(ledger, AccessoryLedger):
        entries = accessory_entries(ledger, fallback_price)
        item.pop("size", None)
        item["note"] = dump_note(ACCESSORY_ENTRIES, entries)
    else:
        entries = variant_entries(ledger, fallback_price)
        item["size"] = ", ".join(e["size"] for e in entries) or NO_SIZE
        item["note"] = dump_note(SIZE_VARIATIONS, entries)

    item["stock"] = sum(e["stock"] for e in entries)
    item["price"] = entries[0]["price"] if entries else to_number(fallback_price)
    return item


# ---------------------------------------------------------------------------
# Deserializer
# ---------------------------------------------------------------------------

def parse_note(note):
    """Return ``(kind, entries)`` for a tagged note, or None for a plain one."""
    if not note or not isinstance(note, str):
        return None
    try:
        data = json.loads(note)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    kind = data.get("_type")
    if kind not in (SIZE_VARIATIONS, ACCESSORY_ENTRIES):
        return None
    entries = data.get(kind)
    if not isinstance(entries, list):
        return None
    return kind, [e for e in entries if isinstance(e, dict)]


def display_note(item):
    """The human-readable note, or None when ``note`` holds variant data."""
    note = (item or {}).get("note")
    if not note or parse_note(note) is not None:
        return None
    return note


def load_ledger(item):
    """Rebuild the editor ledger for an item opened for editing."""
    parsed = parse_note(item.get("note"))
    if parsed is not None:
        kind, entries = parsed
        if kind == SIZE_VARIATIONS:
            return _variants_from_entries(entries, item)
        return _accessories_from_entries(entries, item)

    if item.get("note"):
        logger.debug("Item %s note is not variant data, using size fallback", item.get("id"))
    if item.get("itemType") == ACCESSORIES:
        return AccessoryLedger(
            [
                LedgerRow(
                    stock=to_text(item.get("stock")),
                    price=to_text(item.get("price")),
                    selected=True,
                )
            ]
        )
    return _variants_from_size(item)


def _variants_from_entries(entries, item):
    rows = []
    for entry in entries:
        price = entry.get("price")
        if price is None:
            price = item.get("price")
        beginning = entry.get("beginning_inventory")
        rows.append(
            LedgerRow(
                label=str(entry.get("size") or ""),
                stock=to_text(entry.get("stock")),
                price=to_text(price),
                selected=True,
                beginning_inventory=None if beginning is None else to_number(beginning),
            )
        )
    while len(rows) < VariantSet.min_rows:
        rows.append(LedgerRow())
    variants = VariantSet(rows)
    variants._ensure_selection()
    return variants


def _accessories_from_entries(entries, item):
    rows = [
        LedgerRow(
            stock=to_text(entry.get("stock")),
            price=to_text(entry.get("price") if entry.get("price") is not None else item.get("price")),
            selected=True,
        )
        for entry in entries
    ]
    if not rows:
        return AccessoryLedger.fresh()
    return AccessoryLedger(rows)


def _variants_from_size(item):
    """Legacy items without variant data: match ``size`` tokens to rows.

    Tokens are matched against the default labels by case-sensitive
    substring containment in either direction, so "M" picks "Medium (M)"
    but not "Small (S)". Tokens that match no row become their own
    labelled rows so nothing is dropped.
    """
    variants = VariantSet.fresh()
    variants.rows[0].selected = False

    size = item.get("size") or ""
    tokens = [t.strip() for t in size.split(",") if t.strip()]
    tokens = [t for t in tokens if t.upper() != NO_SIZE]

    for token in tokens:
        matched = False
        for i in range(len(DEFAULT_SIZE_LABELS)):
            label = variants.effective_label(i)
            if token in label or label in token:
                variants.rows[i].selected = True
                matched = True
        if not matched:
            variants.rows.append(LedgerRow(label=token, selected=True))

    variants._ensure_selection()

    seed = variants.first_selected()
    price = to_text(item.get("price"))
    if price and not variants.rows[seed].price:
        variants.rows[seed].price = price
    if len(variants.selected) == 1:
        variants.rows[seed].stock = to_text(item.get("stock"))
    return variants
