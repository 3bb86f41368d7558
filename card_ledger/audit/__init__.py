"""Audit logging package."""

from card_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
