"""
Data Models Package

This package contains all Pydantic models used in the Card Ledger system.
All data flowing through the system must conform to these schemas.
"""

from card_ledger.models.card import (
    Card,
    CardFields,
    CardInput,
    CardPatch,
    CardType,
    CategorySpend,
    EarningRate,
    LedgerModel,
)
from card_ledger.models.alert import (
    RESOLVABLE_ALERT_TYPES,
    Alert,
    AlertType,
    paid_period_key,
)
from card_ledger.models.portfolio import (
    BestRate,
    CashbackStats,
    CategoryReward,
    MilesStats,
    PaymentStatus,
    PortfolioSummary,
)
from card_ledger.models.transfer import (
    ExportDocument,
    ImportResult,
    LedgerSnapshot,
    ValidationIssue,
    ValidationResult,
)
from card_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Card models
    "Card",
    "CardFields",
    "CardInput",
    "CardPatch",
    "CardType",
    "CategorySpend",
    "EarningRate",
    "LedgerModel",
    # Alert models
    "RESOLVABLE_ALERT_TYPES",
    "Alert",
    "AlertType",
    "paid_period_key",
    # Derived models
    "BestRate",
    "CashbackStats",
    "CategoryReward",
    "MilesStats",
    "PaymentStatus",
    "PortfolioSummary",
    # Import/export models
    "ExportDocument",
    "ImportResult",
    "LedgerSnapshot",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
