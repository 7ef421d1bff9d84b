"""Tests for serializing ledgers into the item note and reading them back."""
import json

from uniform_admin.services import note_service
from uniform_admin.services.variant_service import AccessoryLedger, VariantSet


def _tuples(note):
    _, entries = note_service.parse_note(note)
    return {(e["size"], e["stock"], e["price"]) for e in entries}


def test_two_variant_item():
    variants = VariantSet.from_lists(
        ["Small (S)", "Medium (M)"], ["5", "3"], ["100", "120"], selected={0, 1}
    )
    item = note_service.build_item({"name": "Polo", "price": 0}, variants)

    assert item["size"] == "Small (S), Medium (M)"
    assert item["stock"] == 8
    assert item["price"] == 100
    assert item["note"] == (
        '{"_type":"sizeVariations","sizeVariations":['
        '{"size":"Small (S)","stock":5,"price":100,"beginning_inventory":5},'
        '{"size":"Medium (M)","stock":3,"price":120,"beginning_inventory":3}]}'
    )
    assert item["name"] == "Polo"


def test_accessory_item_has_no_size():
    accessories = AccessoryLedger.from_lists(["10"], ["50"], selected={0})
    item = note_service.build_item({"name": "Necktie", "size": "stale"}, accessories)

    assert "size" not in item
    assert item["note"] == (
        '{"_type":"accessoryEntries","accessoryEntries":[{"stock":10,"price":50}]}'
    )
    assert item["stock"] == 10
    assert item["price"] == 50


def test_stock_is_sum_of_selected_rows():
    variants = VariantSet.from_lists(
        ["A", "B", "C", "D"], ["4", "bad", "", "6"], ["1", "1", "1", "1"],
        selected={0, 1, 3},
    )
    item = note_service.build_item({}, variants)
    assert item["stock"] == 10
    assert item["size"] == "A, B, D"


def test_nothing_resolvable_gives_na_and_zero_stock():
    variants = VariantSet.from_lists(["", "", ""], selected={2})
    item = note_service.build_item({"price": ""}, variants)
    assert item["size"] == "N/A"
    assert item["stock"] == 0
    assert item["price"] == 0
    assert json.loads(item["note"]) == {"_type": "sizeVariations", "sizeVariations": []}


def test_blank_label_with_data_gets_positional_name():
    variants = VariantSet.from_lists(["", "", ""], ["0", "0", "2"], selected={2})
    entries = note_service.variant_entries(variants)
    assert entries == [
        {"size": "Size 3", "stock": 2, "price": 0, "beginning_inventory": 2}
    ]


def test_blank_labels_fall_back_to_defaults():
    variants = VariantSet.from_lists(["", ""], ["1", "2"], selected={0, 1})
    entries = note_service.variant_entries(variants)
    assert [e["size"] for e in entries] == ["Small (S)", "Medium (M)"]


def test_row_without_price_uses_form_price():
    variants = VariantSet.from_lists(["S", "M"], ["1", "1"], ["", "80"], selected={0, 1})
    item = note_service.build_item({"price": "75"}, variants)
    assert [e["price"] for e in note_service.parse_note(item["note"])[1]] == [75, 80]
    assert item["price"] == 75


def test_unicode_labels_are_kept_verbatim():
    variants = VariantSet.from_lists(["Niño", "B"], ["1", "0"], selected={0})
    note = note_service.serialize(variants)
    assert '"size":"Niño"' in note


def test_serialize_load_serialize_keeps_entries():
    variants = VariantSet.from_lists(
        ["Small (S)", "", "Large (L)", "XL"],
        ["5", "2", "7", "1"],
        ["100", "", "130.5", "140"],
        selected={0, 1, 2},
    )
    first = note_service.serialize(variants, fallback_price=90)
    item = {"note": first, "price": 90, "itemType": "Uniforms"}
    reloaded = note_service.load_ledger(item)
    second = note_service.serialize(reloaded, fallback_price=90)
    assert _tuples(first) == _tuples(second)


def test_parse_note_ignores_plain_text():
    assert note_service.parse_note("Handle with care") is None
    assert note_service.parse_note("") is None
    assert note_service.parse_note(None) is None
    assert note_service.parse_note('{"hello": 1}') is None
    assert note_service.parse_note("[1, 2]") is None
    assert note_service.parse_note('{"_type":"sizeVariations","sizeVariations":"x"}') is None


def test_display_note():
    assert note_service.display_note({"note": "Deliver Fridays"}) == "Deliver Fridays"
    tagged = '{"_type":"accessoryEntries","accessoryEntries":[]}'
    assert note_service.display_note({"note": tagged}) is None
    assert note_service.display_note({}) is None


def test_load_tagged_variants_pads_and_selects_all():
    note = '{"_type":"sizeVariations","sizeVariations":[{"size":"XL","stock":4,"price":null}]}'
    variants = note_service.load_ledger({"note": note, "price": 250})
    assert isinstance(variants, VariantSet)
    assert variants.values == ["XL", ""]
    assert variants.stocks == ["4", ""]
    assert variants.prices == ["250", ""]
    assert variants.selected == {0}


def test_load_tagged_accessories():
    note = '{"_type":"accessoryEntries","accessoryEntries":[{"stock":10,"price":50},{"stock":2}]}'
    accessories = note_service.load_ledger({"note": note, "price": 45})
    assert isinstance(accessories, AccessoryLedger)
    assert accessories.stocks == ["10", "2"]
    assert accessories.prices == ["50", "45"]
    assert accessories.selected == {0, 1}


def test_load_accessory_without_note_uses_item_fields():
    accessories = note_service.load_ledger(
        {"itemType": "Accessories", "note": "Bulk box", "stock": 12, "price": 35.0}
    )
    assert isinstance(accessories, AccessoryLedger)
    assert accessories.stocks == ["12"]
    assert accessories.prices == ["35"]
    assert accessories.selected == {0}


def test_load_from_size_matches_default_labels():
    variants = note_service.load_ledger(
        {"itemType": "Uniforms", "size": "Small (S), Medium (M)", "stock": 9, "price": 100}
    )
    assert variants.selected == {0, 1}
    assert variants.prices == ["100", ""]
    # Stock cannot be split across two rows
    assert variants.stocks == ["", ""]


def test_load_from_size_single_token_seeds_stock():
    variants = note_service.load_ledger(
        {"itemType": "Uniforms", "size": "Medium", "stock": 9, "price": 100}
    )
    assert variants.selected == {1}
    assert variants.stocks == ["", "9"]
    assert variants.prices == ["", "100"]


def test_load_from_size_keeps_unmatched_tokens():
    variants = note_service.load_ledger(
        {"itemType": "Uniforms", "size": "Large (L)", "stock": 3, "price": 80}
    )
    assert variants.values == ["", "", "Large (L)"]
    assert variants.selected == {2}
    assert variants.stocks[2] == "3"


def test_load_from_na_size_selects_first_row():
    variants = note_service.load_ledger(
        {"itemType": "Uniforms", "size": "N/A", "stock": 0, "price": 60}
    )
    assert variants.selected == {0}
    assert variants.prices[0] == "60"


def test_load_with_garbage_note_falls_back_to_size():
    variants = note_service.load_ledger(
        {"itemType": "Uniforms", "note": "{not json", "size": "Small (S)", "stock": 2, "price": 10}
    )
    assert variants.selected == {0}
    assert variants.stocks[0] == "2"


def test_load_from_size_matches_case_sensitively():
    variants = note_service.load_ledger(
        {"itemType": "Uniforms", "size": "M", "stock": 4, "price": 90}
    )
    assert variants.selected == {1}
    assert variants.stocks == ["", "4"]


def test_single_letter_size_survives_resave():
    item = {"itemType": "Uniforms", "size": "L", "stock": 4, "price": 90}
    variants = note_service.load_ledger(item)
    assert variants.values == ["", "", "L"]
    assert variants.selected == {2}

    rebuilt = note_service.build_item({"price": 90}, variants)
    assert rebuilt["size"] == "L"
    assert rebuilt["stock"] == 4


def test_saved_beginning_inventory_is_kept_on_resave():
    note = (
        '{"_type":"sizeVariations","sizeVariations":['
        '{"size":"Small (S)","stock":2,"price":100,"beginning_inventory":10}]}'
    )
    variants = note_service.load_ledger({"note": note, "price": 100})
    variants.set_label(1, "Large (L)")
    variants.set_stock(1, "3")
    variants.select(1, True)

    entries = note_service.variant_entries(variants)
    assert entries == [
        {"size": "Small (S)", "stock": 2, "price": 100, "beginning_inventory": 10},
        {"size": "Large (L)", "stock": 3, "price": 0, "beginning_inventory": 3},
    ]


def test_relabelled_row_starts_a_new_beginning_inventory():
    note = (
        '{"_type":"sizeVariations","sizeVariations":['
        '{"size":"Small (S)","stock":2,"price":100,"beginning_inventory":10}]}'
    )
    variants = note_service.load_ledger({"note": note, "price": 100})
    variants.set_label(0, "XSmall (XS)")
    entries = note_service.variant_entries(variants)
    assert entries[0]["beginning_inventory"] == 2


def test_rows_naming_the_same_size_are_merged():
    variants = VariantSet.from_lists(
        ["Small (S)", "Medium (M)", "small"], ["2", "1", "3"], ["100", "120", "90"],
        selected={0, 1, 2},
    )
    item = note_service.build_item({}, variants)
    assert item["size"] == "Small (S), Medium (M)"
    assert item["stock"] == 6
    _, entries = note_service.parse_note(item["note"])
    assert entries[0] == {"size": "Small (S)", "stock": 5, "price": 100, "beginning_inventory": 2}
    assert len(entries) == 2


def test_size_key():
    assert note_service.size_key(" Small (S) ") == "small"
    assert note_service.size_key("2XLarge (2XL)") == "2xlarge"
    assert note_service.size_key(None) == ""
