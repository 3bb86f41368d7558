"""
Audit Models for Card Ledger

Every ledger mutation emits an audit event to the structured log. Events
describe what changed (which card, which alert, how many records) so a
session can be reconstructed from the log alone.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Cards
    CARD_ADDED = "card_added"
    CARD_UPDATED = "card_updated"
    CARD_DELETED = "card_deleted"
    SPEND_UPDATED = "spend_updated"

    # Alerts
    ALERTS_RAISED = "alerts_raised"
    ALERT_READ = "alert_read"
    ALERT_RESOLVED = "alert_resolved"
    ALERT_DELETED = "alert_deleted"
    PAYMENT_UNMARKED = "payment_unmarked"

    # Data management
    DATA_EXPORTED = "data_exported"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_REJECTED = "import_rejected"
    DATA_CLEARED = "data_cleared"

    # System events
    STORAGE_UNAVAILABLE = "storage_unavailable"
    RECORD_CORRUPT = "record_corrupt"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=datetime.now)

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'card', 'alert', 'ledger')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by a caller operation?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.card_added(card_id, name)
        event = AuditEventBuilder.alert_resolved(alert_id, card_id, "payment_due", key)
    """

    @staticmethod
    def card_added(card_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CARD_ADDED,
            entity_type="card",
            entity_id=card_id,
            description=f"Card added: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def card_updated(card_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CARD_UPDATED,
            entity_type="card",
            entity_id=card_id,
            description=f"Card updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def card_deleted(card_id: str, alerts_removed: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CARD_DELETED,
            entity_type="card",
            entity_id=card_id,
            description=f"Card deleted with {alerts_removed} alerts",
            details={"alerts_removed": alerts_removed},
            is_user_action=True,
        )

    @staticmethod
    def spend_updated(card_id: str, category: str, amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPEND_UPDATED,
            entity_type="card",
            entity_id=card_id,
            description=f"Spend for {category} set to {amount:,.2f}",
            details={"category": category, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def alerts_raised(alert_ids: list[str], alert_types: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERTS_RAISED,
            entity_type="alert",
            description=f"{len(alert_ids)} alerts raised",
            details={"alert_ids": alert_ids, "alert_types": alert_types},
        )

    @staticmethod
    def alert_read(alert_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_READ,
            entity_type="alert",
            entity_id=alert_id,
            description="Alert marked read",
            is_user_action=True,
        )

    @staticmethod
    def alert_resolved(
        alert_id: str,
        card_id: str,
        alert_type: str,
        paid_period: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_RESOLVED,
            entity_type="alert",
            entity_id=alert_id,
            description=f"Alert resolved: {alert_type}",
            details={
                "card_id": card_id,
                "alert_type": alert_type,
                "paid_period": paid_period,
            },
            is_user_action=True,
        )

    @staticmethod
    def alert_deleted(alert_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_DELETED,
            entity_type="alert",
            entity_id=alert_id,
            description="Alert deleted",
            is_user_action=True,
        )

    @staticmethod
    def payment_unmarked(card_id: str, paid_period: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_UNMARKED,
            entity_type="card",
            entity_id=card_id,
            description="Payment period unmarked",
            details={"paid_period": paid_period},
            is_user_action=True,
        )

    @staticmethod
    def data_exported(card_count: int, alert_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_EXPORTED,
            entity_type="ledger",
            description=f"Exported {card_count} cards and {alert_count} alerts",
            details={"cards": card_count, "alerts": alert_count},
            is_user_action=True,
        )

    @staticmethod
    def import_completed(card_count: int, alert_count: int, warnings: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="ledger",
            description=f"Imported {card_count} cards and {alert_count} alerts",
            details={"cards": card_count, "alerts": alert_count, "warnings": warnings},
            is_user_action=True,
        )

    @staticmethod
    def import_rejected(message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description="Import rejected",
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description="All ledger data cleared",
            is_user_action=True,
        )

    @staticmethod
    def storage_unavailable(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            description=f"Storage unavailable during {operation}; continuing in memory",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def record_corrupt(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CORRUPT,
            severity=AuditSeverity.ERROR,
            description=f"Stored record {key!r} could not be read; treated as empty",
            error_message=error_message,
            details={"key": key},
        )
