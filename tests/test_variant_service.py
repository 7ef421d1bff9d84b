"""Tests for the variant/accessory ledger."""
import random

import pytest

from uniform_admin.services.variant_service import (
    AccessoryLedger,
    LedgerRow,
    VariantSet,
    fresh_ledger,
    ledger_from_dict,
    to_number,
    to_text,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5", 5),
        (" 12 ", 12),
        ("99.5", 99.5),
        ("7.0", 7),
        ("", 0),
        ("abc", 0),
        ("1_000", 0),
        ("nan", 0),
        ("inf", 0),
        (None, 0),
        (3, 3),
        (2.5, 2.5),
    ],
)
def test_to_number(raw, expected):
    assert to_number(raw) == expected


def test_to_number_integral_values_are_ints():
    assert isinstance(to_number("5.0"), int)


def test_to_text():
    assert to_text(None) == ""
    assert to_text(5.0) == "5"
    assert to_text(99.5) == "99.5"
    assert to_text(12) == "12"


def test_fresh_variant_set():
    variants = VariantSet.fresh()
    assert variants.values == ["", ""]
    assert variants.stocks == ["", ""]
    assert variants.prices == ["", ""]
    assert variants.selected == {0}


def test_fresh_ledger_by_item_type():
    assert isinstance(fresh_ledger("Accessories"), AccessoryLedger)
    assert isinstance(fresh_ledger("Uniforms"), VariantSet)
    assert isinstance(fresh_ledger(""), VariantSet)
    assert fresh_ledger("Accessories").selected == {0}


def test_add_and_remove_keep_lengths_in_step():
    rng = random.Random(1234)
    variants = VariantSet.fresh()
    for _ in range(200):
        if rng.random() < 0.55:
            variants.add_row()
        else:
            variants.remove_row(rng.randrange(len(variants) + 1))
        assert len(variants.values) == len(variants.stocks) == len(variants.prices)
        assert len(variants) >= 1
        assert all(i < len(variants) for i in variants.selected)


def test_selection_never_empty_after_toggle_or_remove():
    rng = random.Random(99)
    variants = VariantSet.fresh()
    for _ in range(5):
        variants.add_row()
    for _ in range(300):
        op = rng.choice(["check", "uncheck", "remove", "add"])
        if op == "add":
            variants.add_row()
        elif op == "remove":
            variants.remove_row(rng.randrange(len(variants)))
        else:
            variants.select(rng.randrange(len(variants)), op == "check")
        assert variants.selected


def test_remove_shifts_selection():
    variants = VariantSet.from_lists(["A", "B", "C"], selected={0, 2})
    assert variants.remove_row(0) is True
    assert variants.selected == {1}
    assert variants.values == ["B", "C"]


def test_remove_last_remaining_row_is_refused():
    accessories = AccessoryLedger.fresh()
    assert accessories.remove_row(0) is False
    assert len(accessories) == 1


def test_remove_out_of_range_is_refused():
    variants = VariantSet.fresh()
    assert variants.remove_row(5) is False
    assert len(variants) == 2


def test_removing_only_selected_row_falls_back_to_first():
    variants = VariantSet.from_lists(["A", "B", "C"], selected={2})
    variants.remove_row(2)
    assert variants.selected == {0}


def test_unchecking_everything_falls_back_to_first():
    variants = VariantSet.from_lists(["A", "B"], selected={1})
    variants.select(1, False)
    assert variants.selected == {0}


def test_edit_unknown_row_raises():
    with pytest.raises(IndexError):
        VariantSet.fresh().set_stock(4, "1")


def test_set_fields_store_text():
    variants = VariantSet.fresh()
    variants.set_label(1, "Large (L)")
    variants.set_stock(1, 4)
    variants.set_price(1, 150.0)
    assert variants.rows[1] == LedgerRow("Large (L)", "4", "150", False)


def test_effective_label_defaults():
    variants = VariantSet.fresh()
    variants.add_row()
    assert variants.effective_label(0) == "Small (S)"
    assert variants.effective_label(1) == "Medium (M)"
    assert variants.effective_label(2) == ""
    variants.set_label(0, "  XL  ")
    assert variants.effective_label(0) == "XL"


def test_size_string_uses_selected_rows_in_order():
    variants = VariantSet.from_lists(["", "", "Large (L)", ""], selected={3, 2, 0})
    assert variants.size_string() == "Small (S), Large (L)"


def test_total_stock_counts_selected_only():
    variants = VariantSet.from_lists(
        ["A", "B", "C"], stocks=["5", "x", "9"], selected={0, 1}
    )
    assert variants.total_stock() == 5


def test_from_lists_pads_short_columns():
    variants = VariantSet.from_lists(["A", "B", "C"], stocks=["1"], prices=[])
    assert variants.stocks == ["1", "", ""]
    assert variants.prices == ["", "", ""]


def test_accessory_add_row_is_selected():
    accessories = AccessoryLedger.fresh()
    index = accessories.add_row()
    assert index == 1
    assert accessories.selected == {0, 1}


def test_ledger_dict_round_trip():
    variants = VariantSet.from_lists(
        ["Small (S)", "Large (L)"], ["3", "4"], ["100", ""], selected={1}
    )
    restored = ledger_from_dict(variants.to_dict())
    assert restored == variants

    accessories = AccessoryLedger.from_lists(["10"], ["50"], selected={0})
    assert ledger_from_dict(accessories.to_dict()) == accessories


def test_ledger_from_dict_rejects_unknown_kind():
    with pytest.raises(ValueError):
        ledger_from_dict({"kind": "colours", "rows": []})


def test_ledger_from_dict_empty_rows_is_fresh():
    assert ledger_from_dict({"kind": "sizeVariations", "rows": []}) == VariantSet.fresh()


def test_ledger_dict_keeps_beginning_inventory():
    variants = VariantSet([LedgerRow("Small (S)", "2", "100", True, 10), LedgerRow()])
    restored = ledger_from_dict(variants.to_dict())
    assert restored.rows[0].beginning_inventory == 10
    assert restored.rows[1].beginning_inventory is None

    older = {"kind": "sizeVariations", "rows": [["XL", "1", "5", True], ["", "", "", False]]}
    assert ledger_from_dict(older).rows[0].beginning_inventory is None
