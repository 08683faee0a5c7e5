from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation

logger = logging.getLogger(__name__)


# Display symbols keyed by ISO 4217 code
CURRENCY_SYMBOLS: dict[str, str] = {
	"AED": "د.إ",
	"ARS": "$",
	"AUD": "$",
	"BDT": "৳",
	"BGN": "лв",
	"BRL": "R$",
	"CAD": "$",
	"CHF": "CHF",
	"CLP": "$",
	"CNY": "¥",
	"COP": "$",
	"CZK": "Kč",
	"DKK": "kr",
	"EGP": "£",
	"EUR": "€",
	"GBP": "£",
	"HKD": "$",
	"HUF": "Ft",
	"IDR": "Rp",
	"ILS": "₪",
	"INR": "₹",
	"ISK": "kr",
	"JPY": "¥",
	"KES": "KSh",
	"KRW": "₩",
	"MXN": "$",
	"MYR": "RM",
	"NGN": "₦",
	"NOK": "kr",
	"NZD": "$",
	"PHP": "₱",
	"PKR": "₨",
	"PLN": "zł",
	"RON": "lei",
	"RUB": "₽",
	"SAR": "﷼",
	"SEK": "kr",
	"SGD": "$",
	"THB": "฿",
	"TRY": "₺",
	"TWD": "NT$",
	"UAH": "₴",
	"USD": "$",
	"VND": "₫",
	"ZAR": "R",
}


def currency_symbol(code: str) -> str:
	"""Return the display symbol for ``code``; unknown codes render without a symbol."""
	symbol = CURRENCY_SYMBOLS.get((code or "").strip().upper())
	if symbol is None:
		logger.warning("Unknown currency code %r; amounts will have no symbol", code)
		return ""
	return symbol


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts."""
	try:
		return Decimal(str(x))
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")


def round_money_dec(x: float | Decimal) -> Decimal:
	d = to_decimal(x)
	return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)


def fmt_money(x: float | Decimal, symbol: str = "") -> str:
	"""Format a monetary value with two decimals, prefixed by ``symbol``."""
	return f"{symbol}{round_money_dec(x):.2f}"
