"""Integer arithmetic utilities for cents-based money.

All prices, shipping costs and totals use int (cents). No float, no Decimal.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def line_total(price_cents: int, quantity: int) -> int:
    """Subtotal of one line: unit price × quantity."""
    return price_cents * quantity


def mean_cents(total: int, count: int) -> int:
    """Mean rounded half-up to whole cents; 0 when there is nothing to average."""
    if count == 0:
        return 0
    return (2 * total + count) // (2 * count)
