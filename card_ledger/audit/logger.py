"""
Audit Logger

Every ledger mutation is logged as a structured event. The logger never
raises: a logging failure must not turn a successful ledger operation
into a failed one.

Events go to the local structured log only. Durable state lives in the
key-value store and nowhere else.
"""

from typing import Optional

import structlog

from card_ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """Central audit logging service."""

    def __init__(self):
        self._logger = structlog.get_logger("card_ledger.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally."""
        log_dict = event.to_log_dict()
        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (TypeError, ValueError) as e:
            # Unserializable details; keep the event, drop the payload
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=log_dict["event_id"],
            )

    def log_card_added(self, card_id: str, name: str) -> None:
        self.log(AuditEventBuilder.card_added(card_id=card_id, name=name))

    def log_card_updated(self, card_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.card_updated(card_id=card_id, fields=fields))

    def log_card_deleted(self, card_id: str, alerts_removed: int) -> None:
        self.log(AuditEventBuilder.card_deleted(card_id=card_id, alerts_removed=alerts_removed))

    def log_spend_updated(self, card_id: str, category: str, amount: float) -> None:
        self.log(AuditEventBuilder.spend_updated(card_id=card_id, category=category, amount=amount))

    def log_alerts_raised(self, alert_ids: list[str], alert_types: list[str]) -> None:
        """Log a recomputation pass that produced new alerts."""
        if not alert_ids:
            return
        self.log(AuditEventBuilder.alerts_raised(alert_ids=alert_ids, alert_types=alert_types))

    def log_alert_read(self, alert_id: str) -> None:
        self.log(AuditEventBuilder.alert_read(alert_id=alert_id))

    def log_alert_resolved(
        self,
        alert_id: str,
        card_id: str,
        alert_type: str,
        paid_period: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.alert_resolved(
            alert_id=alert_id,
            card_id=card_id,
            alert_type=alert_type,
            paid_period=paid_period,
        ))

    def log_alert_deleted(self, alert_id: str) -> None:
        self.log(AuditEventBuilder.alert_deleted(alert_id=alert_id))

    def log_payment_unmarked(self, card_id: str, paid_period: str) -> None:
        self.log(AuditEventBuilder.payment_unmarked(card_id=card_id, paid_period=paid_period))

    def log_data_exported(self, card_count: int, alert_count: int) -> None:
        self.log(AuditEventBuilder.data_exported(card_count=card_count, alert_count=alert_count))

    def log_import_completed(self, card_count: int, alert_count: int, warnings: list[str]) -> None:
        self.log(AuditEventBuilder.import_completed(
            card_count=card_count,
            alert_count=alert_count,
            warnings=warnings,
        ))

    def log_import_rejected(self, message: str) -> None:
        self.log(AuditEventBuilder.import_rejected(message=message))

    def log_data_cleared(self) -> None:
        self.log(AuditEventBuilder.data_cleared())

    def log_storage_unavailable(self, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_unavailable(
            operation=operation,
            error_message=error_message,
        ))

    def log_record_corrupt(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.record_corrupt(key=key, error_message=error_message))
