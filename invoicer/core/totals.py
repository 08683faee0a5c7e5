from __future__ import annotations

from typing import List, Sequence

from invoicer.core.errors import InputValidationError
from invoicer.data.models import TotalsResult


def effective_quantity(quantities: Sequence[float], i: int) -> float:
    """Quantity for item ``i``; items without a quantity count once."""
    return float(quantities[i]) if i < len(quantities) else 1.0


def effective_rate(rates: Sequence[float], i: int) -> float:
    """Rate for item ``i``; missing rates reuse the first one."""
    return float(rates[i]) if i < len(rates) else float(rates[0])


def line_amounts(items: Sequence[str], quantities: Sequence[float], rates: Sequence[float]) -> List[float]:
    if items and not rates:
        raise InputValidationError("at least one rate is required to price line items")
    return [effective_quantity(quantities, i) * effective_rate(rates, i) for i in range(len(items))]


def compute_totals(
    items: Sequence[str],
    quantities: Sequence[float],
    rates: Sequence[float],
    tax_rate: float = 0.0,
    tax_inclusive: bool = False,
    discount_rate: float = 0.0,
) -> TotalsResult:
    """Derive the invoice totals from the parallel item arrays.

    With ``tax_inclusive`` the rates already contain the tax: the displayed
    subtotal backs it out, and the grand total is the subtotal less discount
    with no tax added on top.
    """
    amounts = line_amounts(items, quantities, rates)
    subtotal = sum(amounts)
    total_hours = sum(effective_quantity(quantities, i) for i in range(len(items)))

    # a rate of zero or below means no tax at all
    tax = subtotal * tax_rate if tax_rate > 0 else 0.0
    discount = subtotal * discount_rate

    if tax_inclusive:
        display_subtotal = subtotal - tax
        total = subtotal - discount
    else:
        display_subtotal = subtotal
        total = subtotal - discount + tax

    return TotalsResult(
        amounts=tuple(amounts),
        subtotal=subtotal,
        display_subtotal=display_subtotal,
        total_hours=total_hours,
        tax=tax,
        discount=discount,
        total=total,
        tax_rate=tax_rate,
    )
