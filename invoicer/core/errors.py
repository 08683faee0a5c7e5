from __future__ import annotations


class InvoiceError(Exception):
    """Base class for every failure surfaced by a generate/render pass."""


class InputValidationError(InvoiceError):
    """Input data is malformed; raised before any drawing happens."""


class ConfigError(InputValidationError):
    """The JSON config file is unreadable or holds values of the wrong shape."""


class WorklogHeaderError(InputValidationError):
    pass


class WorklogRowError(InputValidationError):
    pass


class WorklogDateError(InputValidationError):
    pass


class WorklogDurationError(InputValidationError):
    pass


class AssetError(InvoiceError):
    """An image referenced by the document could not be read or decoded."""


class RenderError(InvoiceError):
    """The PDF backend failed while drawing or finalizing the page."""
