from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Party:
	"""Issuer or recipient of an invoice."""

	name: str
	address: Tuple[str, ...] = ()
	details: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class InvoiceDocument:
	# Full identifier, prefix already applied (e.g. "INV202410")
	id: str
	title: str
	issuer: Party
	recipient: Party
	date: str
	generated_on: date
	items: Tuple[str, ...] = ()
	quantities: Tuple[float, ...] = ()
	rates: Tuple[float, ...] = ()
	dates: Tuple[date, ...] = ()
	rates_tax_inclusive: bool = False
	tax: float = 0.0
	tax_name: str = "VAT"
	discount: float = 0.0
	currency: str = "USD"
	due: str = ""
	due_days: int = 0
	note: str = ""
	logo: Optional[str] = None
	logo_size: float = 100.0
	protect: bool = False


@dataclass(frozen=True)
class WorklogEntry:
	date: date
	hours: float
	description: str


@dataclass(frozen=True)
class TotalsResult:
	amounts: Tuple[float, ...]
	subtotal: float
	display_subtotal: float
	total_hours: float
	tax: float
	discount: float
	total: float
	tax_rate: float = 0.0

	# A zero rate or amount hides the row; the value itself is still 0
	@property
	def show_tax(self) -> bool:
		return self.tax_rate > 0

	@property
	def show_discount(self) -> bool:
		return self.discount > 0
