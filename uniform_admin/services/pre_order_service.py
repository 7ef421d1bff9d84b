"""Pending pre-orders that a newly stocked item would fulfil."""
from uniform_admin.services import backend_client


def _line_matches(line, name, education_level, size):
    if (line.get("name") or "").lower() != (name or "").lower():
        return False
    if line.get("education_level") != education_level:
        return False
    if not size or size == "N/A":
        return True
    # Item size may list several variants ("Small (S), Medium (M)")
    return line.get("size") in {s.strip() for s in size.split(",")}


def count_matching_pre_orders(name, education_level, size=None):
    """Number of pending pre-orders with a line for this item."""
    if not name or not education_level:
        return 0
    body = backend_client.get(
        "/orders", params={"order_type": "pre-order", "status": "pending"}
    )
    orders = body.get("data") or []
    return sum(
        1
        for order in orders
        if any(
            _line_matches(line, name, education_level, size)
            for line in order.get("items") or []
        )
    )
