from __future__ import annotations

from dataclasses import dataclass, asdict, field, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

import yaml

from invoicer.core.errors import ConfigError
from invoicer.data.models import InvoiceDocument, Party

logger = logging.getLogger(__name__)

ISSUE_DATE_FORMAT = "%b %d, %Y"

YAML_SUFFIXES = (".yaml", ".yml")

# Keys of the config file format mapped onto Settings fields
CONFIG_ALIASES: Dict[str, str] = {
	"idPrefix": "id_prefix",
	"logoSize": "logo_size",
	"from": "issuer",
	"fromDetails": "issuer_details",
	"fromAddress": "issuer_address",
	"to": "recipient",
	"toDetails": "recipient_details",
	"toAddress": "recipient_address",
	"dueDays": "due_days",
	"ratesTaxInclusive": "rates_tax_inclusive",
	"taxName": "tax_name",
}


@dataclass
class Settings:
	generated_on: date
	id: str = ""
	id_prefix: str = "INV"
	title: str = "INVOICE"
	logo: Optional[str] = None
	logo_size: float = 100.0
	issuer: str = "Project Folded, Inc."
	issuer_details: Dict[str, str] = field(default_factory=dict)
	issuer_address: List[str] = field(default_factory=lambda: ["1", "Main st", "Newyark", "626112"])
	recipient: str = "Untitled Corporation, Inc."
	recipient_details: Dict[str, str] = field(default_factory=dict)
	recipient_address: List[str] = field(default_factory=lambda: ["1/56A", "Main st", "Newyark", "626112"])
	date: str = ""
	due: str = ""
	due_days: int = 14
	items: List[str] = field(default_factory=lambda: ["Paper Cranes"])
	quantities: List[float] = field(default_factory=lambda: [2.0])
	rates: List[float] = field(default_factory=lambda: [25.0])
	# ISO strings from JSON or date objects
	dates: List[Any] = field(default_factory=list)
	rates_tax_inclusive: bool = False
	tax: float = 0.0
	tax_name: str = "VAT"
	discount: float = 0.0
	currency: str = "USD"
	note: str = ""
	protect: bool = False

	@classmethod
	def defaults(cls, today: date) -> "Settings":
		"""Defaults for a run on ``today``: id YYYYMM, issued today, one dated item."""
		return cls(
			generated_on=today,
			id=today.strftime("%Y%m"),
			date=today.strftime(ISSUE_DATE_FORMAT),
			dates=[today],
		)

	def merged(self, data: Dict[str, Any]) -> "Settings":
		"""Return a copy with known keys of ``data`` applied; unknown keys are ignored."""
		current = asdict(self)
		known: Dict[str, Any] = {}
		for key, value in data.items():
			name = CONFIG_ALIASES.get(key, key)
			if name in current and name != "generated_on":
				known[name] = value
			else:
				logger.debug("Ignoring unknown config key %r", key)
		return replace(self, **known)

	def to_document(self) -> InvoiceDocument:
		"""Freeze these settings into the document handed to the renderer."""
		try:
			return InvoiceDocument(
				id=f"{self.id_prefix}{self.id}",
				title=str(self.title),
				issuer=_party(self.issuer, self.issuer_address, self.issuer_details),
				recipient=_party(self.recipient, self.recipient_address, self.recipient_details),
				date=str(self.date),
				generated_on=self.generated_on,
				items=tuple(str(i) for i in self.items or ()),
				quantities=tuple(float(q) for q in self.quantities or ()),
				rates=tuple(float(r) for r in self.rates or ()),
				dates=tuple(_parse_date(d) for d in self.dates or ()),
				rates_tax_inclusive=bool(self.rates_tax_inclusive),
				tax=float(self.tax),
				tax_name=str(self.tax_name),
				discount=float(self.discount),
				currency=str(self.currency),
				due=str(self.due or ""),
				due_days=int(self.due_days),
				note=str(self.note or ""),
				logo=str(self.logo) if self.logo else None,
				logo_size=float(self.logo_size),
				protect=bool(self.protect),
			)
		except (TypeError, ValueError, AttributeError) as exc:
			raise ConfigError(f"invalid invoice settings: {exc}") from exc


def _party(name: Any, address: Any, details: Any) -> Party:
	return Party(
		name=str(name),
		address=tuple(str(a) for a in address or ()),
		details={str(k): str(v) for k, v in (details or {}).items()},
	)


def _parse_date(val: Any) -> date:
	if isinstance(val, datetime):
		return val.date()
	if isinstance(val, date):
		return val
	# Accept full timestamps ("2024-01-05T00:00:00Z") as well as plain dates
	return date.fromisoformat(str(val)[:10])


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
	"""Read a JSON or YAML (.yaml/.yml) config file (UTF-8) holding a single object."""
	p = Path(path)
	try:
		with p.open("r", encoding="utf-8") as f:
			if p.suffix.lower() in YAML_SUFFIXES:
				raw = yaml.safe_load(f)
			else:
				raw = json.load(f)
	except (json.JSONDecodeError, yaml.YAMLError, OSError) as exc:
		raise ConfigError(f"could not read config {p}: {exc}") from exc
	if not isinstance(raw, dict):
		raise ConfigError(f"config {p} must contain a single object")
	return raw


def load_settings(path: Optional[Union[str, Path]], today: date) -> Settings:
	"""Defaults for ``today`` with the config file at ``path`` (if any) merged over them."""
	settings = Settings.defaults(today)
	if path is None:
		return settings
	logger.info("Loading config %s", path)
	return settings.merged(load_config(path))
