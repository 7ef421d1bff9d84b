#!/usr/bin/env python3
"""Seed sample uniform items into a development backend."""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from uniform_admin import create_app
from uniform_admin.extensions import db
from uniform_admin.services import item_service
from uniform_admin.services.backend_client import BackendError
from uniform_admin.services.editor_service import ItemEditor

app = create_app()

# (label, stock, price) per variant; accessories have no label
SAMPLE_ITEMS = [
    {
        "name": "Polo Shirt",
        "educationLevel": "College",
        "itemType": "Uniforms",
        "forGender": "Male",
        "material": "Cotton pique",
        "variants": [("Small (S)", 20, 350), ("Medium (M)", 25, 350), ("Large (L)", 15, 380)],
    },
    {
        "name": "Blouse",
        "educationLevel": "Senior High School",
        "itemType": "Uniforms",
        "forGender": "Female",
        "material": "Poly-cotton",
        "variants": [("Small (S)", 18, 320), ("Medium (M)", 22, 320)],
    },
    {
        "name": "PE Jogging Pants",
        "educationLevel": "Junior High School",
        "itemType": "PE Uniform",
        "forGender": "Unisex",
        "material": "Dri-fit",
        "variants": [("Medium (M)", 30, 420), ("XLarge (XL)", 8, 450)],
    },
    {
        "name": "Necktie",
        "educationLevel": "All Education Levels",
        "itemType": "Accessories",
        "forGender": "Unisex",
        "variants": [(None, 60, 120)],
    },
    {
        "name": "School Patch",
        "educationLevel": "All Education Levels",
        "itemType": "Accessories",
        "forGender": "Unisex",
        "variants": [(None, 200, 45), (None, 50, 40)],
    },
]


def build(sample):
    """Fill an editor the way the console does and return the item payload."""
    editor = ItemEditor.for_new_item()
    editor.update_fields(
        {
            "name": sample["name"],
            "educationLevel": sample["educationLevel"],
            "itemType": sample["itemType"],
            "forGender": sample["forGender"],
            "material": sample.get("material", ""),
        }
    )
    for i, (label, stock, price) in enumerate(sample["variants"]):
        if i >= len(editor.ledger):
            editor.add_row()
        editor.set_row(i, label=label, stock=stock, price=price)
        editor.toggle_row(i, True)
    return editor.build_item()


def seed():
    with app.app_context():
        existing = item_service.list_items(limit=1)
        if existing["items"]:
            print("Items already exist, skipping seed.")
            return

        for sample in SAMPLE_ITEMS:
            item = build(sample)
            try:
                created = item_service.create_item(item, "seed")
            except BackendError as e:
                db.session.rollback()
                print(f"  Failed {sample['name']}: {e.message}")
                continue
            print(f"  Created {created.get('id')}: {item['name']} ({item.get('size', 'accessory')})")

        print(f"\nSeeded {len(SAMPLE_ITEMS)} items.")


if __name__ == "__main__":
    seed()
