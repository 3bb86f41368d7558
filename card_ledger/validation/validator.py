"""
Two-Stage Import Validation

STAGE 1 - SCHEMA VALIDATION:
- JSON parsing
- Top-level shape (a 'cards' array is required)
- Every card and alert validates against its model, after defaulting
  optional fields that older exports omit

STAGE 2 - SEMANTIC VALIDATION:
- Duplicate card or alert IDs
- Alerts pointing at cards that are not in the document
- Unknown document version

Stage 2 only runs when stage 1 passes. Validation never fixes data
silently: every dropped record is reported as a warning.
"""

import json
from typing import Any, Optional, Union

from pydantic import ValidationError

from card_ledger.config import ExportSettings
from card_ledger.models import (
    Alert,
    AlertType,
    Card,
    LedgerSnapshot,
    ValidationIssue,
    ValidationResult,
)


# Defaults applied to card records from older exports
CARD_FIELD_DEFAULTS = {
    "spendByCategory": [],
    "earningRates": [],
    "isActive": True,
}

# Alert types this version raises; older exports may carry retired ones
KNOWN_ALERT_TYPES = frozenset(alert_type.value for alert_type in AlertType)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "record"
    extra = f" (+{error.error_count() - 1} more)" if error.error_count() > 1 else ""
    return f"{location}: {first['msg']}{extra}"


def _with_card_defaults(record: dict[str, Any]) -> dict[str, Any]:
    merged = dict(record)
    for key, default in CARD_FIELD_DEFAULTS.items():
        if merged.get(key) is None:
            merged[key] = list(default) if isinstance(default, list) else default
    return merged


class ImportValidator:
    """Validates an export document before it replaces ledger state."""

    def __init__(self, settings: Optional[ExportSettings] = None):
        self._settings = settings or ExportSettings()

    def _validate_schema(
        self,
        raw: Union[str, bytes],
    ) -> tuple[bool, list[ValidationIssue], Optional[dict], list[Card], list[Alert]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, issues, document, cards, alerts)
        """
        issues: list[ValidationIssue] = []
        cards: list[Card] = []
        alerts: list[Alert] = []

        try:
            document = json.loads(raw)
        except (ValueError, TypeError, RecursionError) as e:
            issues.append(ValidationIssue(
                field="document",
                issue_type="invalid_json",
                message=f"Invalid JSON: {e}",
                severity="error",
                suggested_fix="Select a file produced by the export function",
            ))
            return False, issues, None, cards, alerts

        if not isinstance(document, dict):
            issues.append(ValidationIssue(
                field="document",
                issue_type="invalid_type",
                message="Invalid data format: document must be a JSON object",
                severity="error",
            ))
            return False, issues, None, cards, alerts

        if not isinstance(document.get("cards"), list):
            issues.append(ValidationIssue(
                field="cards",
                issue_type="missing",
                message="Invalid data format: missing 'cards' array",
                severity="error",
                suggested_fix="The document must contain a 'cards' list",
            ))
            return False, issues, document, cards, alerts

        for name in ("alerts", "paidPaymentPeriods"):
            value = document.get(name)
            if value is not None and not isinstance(value, list):
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="invalid_type",
                    message=f"Invalid data format: '{name}' must be an array",
                    severity="error",
                ))

        for index, record in enumerate(document["cards"]):
            if not isinstance(record, dict):
                issues.append(ValidationIssue(
                    field=f"cards[{index}]",
                    issue_type="invalid_type",
                    message=f"Card {index + 1} is not an object",
                    severity="error",
                ))
                continue
            try:
                cards.append(Card.model_validate(_with_card_defaults(record)))
            except ValidationError as e:
                issues.append(ValidationIssue(
                    field=f"cards[{index}]",
                    issue_type="invalid_record",
                    message=f"Card {index + 1} is invalid: {_describe(e)}",
                    severity="error",
                ))

        alert_records = document.get("alerts")
        if not isinstance(alert_records, list):
            alert_records = []

        for index, record in enumerate(alert_records):
            if isinstance(record, dict) and record.get("type") not in KNOWN_ALERT_TYPES:
                issues.append(ValidationIssue(
                    field=f"alerts[{index}]",
                    issue_type="unknown_alert_type",
                    message=f"Alert {index + 1} has unknown type {record.get('type')!r}; skipped",
                    severity="warning",
                ))
                continue
            try:
                alerts.append(Alert.model_validate(record))
            except ValidationError as e:
                issues.append(ValidationIssue(
                    field=f"alerts[{index}]",
                    issue_type="invalid_record",
                    message=f"Alert {index + 1} is invalid: {_describe(e)}",
                    severity="error",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues, document, cards, alerts

    def _validate_semantic(
        self,
        document: dict,
        cards: list[Card],
        alerts: list[Alert],
    ) -> tuple[bool, list[ValidationIssue], list[Alert]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, issues, alerts_to_keep)
        """
        issues: list[ValidationIssue] = []

        version = document.get("version")
        if version != self._settings.data_version:
            issues.append(ValidationIssue(
                field="version",
                issue_type="unknown_version",
                message=(
                    f"Document version {version!r} differs from "
                    f"{self._settings.data_version!r}; importing anyway"
                ),
                severity="warning",
            ))

        card_ids: set[str] = set()
        for card in cards:
            if card.id in card_ids:
                issues.append(ValidationIssue(
                    field="cards",
                    issue_type="duplicate",
                    message=f"Duplicate card ID: {card.id}",
                    severity="error",
                ))
            card_ids.add(card.id)

        alert_ids: set[str] = set()
        kept: list[Alert] = []
        for alert in alerts:
            if alert.id in alert_ids:
                issues.append(ValidationIssue(
                    field="alerts",
                    issue_type="duplicate",
                    message=f"Duplicate alert ID: {alert.id}",
                    severity="error",
                ))
            alert_ids.add(alert.id)

            if alert.card_id not in card_ids:
                issues.append(ValidationIssue(
                    field="alerts",
                    issue_type="dangling_reference",
                    message=f"Alert {alert.id} refers to unknown card {alert.card_id}; skipped",
                    severity="warning",
                ))
                continue
            kept.append(alert)

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues, kept

    def validate(self, raw: Union[str, bytes]) -> tuple[ValidationResult, Optional[LedgerSnapshot]]:
        """
        Run the full two-stage pipeline.

        Returns:
            (result, snapshot) - snapshot is None unless the result is valid
        """
        schema_valid, issues, document, cards, alerts = self._validate_schema(raw)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues, alerts = self._validate_semantic(document, cards, alerts)
            issues.extend(semantic_issues)

        result = ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=issues,
            warnings=[issue.message for issue in issues if issue.severity == "warning"],
        )
        if not result.is_valid:
            return result, None

        snapshot = LedgerSnapshot(
            cards=cards,
            alerts=alerts,
            paid_periods={str(key) for key in document.get("paidPaymentPeriods") or []},
        )
        return result, snapshot

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One message suitable for showing next to the import button."""
        if result.is_valid:
            if result.warnings:
                return "Imported with warnings: " + "; ".join(result.warnings)
            return "All checks passed"

        errors = result.errors
        message = errors[0].message
        if len(errors) > 1:
            message += f" (and {len(errors) - 1} more problems)"
        return message
