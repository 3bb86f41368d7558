"""Import/export package."""

from card_ledger.transfer.exchange import DataExchange, ImportOutcome

__all__ = ["DataExchange", "ImportOutcome"]
