"""Import validation package."""

from card_ledger.validation.validator import CARD_FIELD_DEFAULTS, ImportValidator

__all__ = ["CARD_FIELD_DEFAULTS", "ImportValidator"]
