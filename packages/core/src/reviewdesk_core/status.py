"""Closed status vocabularies and their presentation tables.

Each status the backend reports is an enum member with one row in a mapping
table. Values outside the enum raise UnknownStatusError instead of silently
rendering as something else.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from reviewdesk_core.exceptions import UnknownStatusError


@dataclass(frozen=True)
class StatusStyle:
    text: str
    style: str  # rich style
    icon: str


class ReviewStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: str) -> ReviewStatus:
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatusError("review", value) from None


STATUS_CONFIG: dict[ReviewStatus, StatusStyle] = {
    ReviewStatus.COMPLETED: StatusStyle(text="Completed", style="green", icon="✓"),
    ReviewStatus.FAILED: StatusStyle(text="Failed", style="red", icon="✗"),
    ReviewStatus.PROCESSING: StatusStyle(text="Processing", style="blue", icon="⟳"),
    ReviewStatus.PENDING: StatusStyle(text="Pending", style="dim", icon="…"),
}


def get_status_config(status: str | ReviewStatus) -> StatusStyle:
    return STATUS_CONFIG[ReviewStatus.parse(status) if isinstance(status, str) else status]


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: str) -> Severity:
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatusError("severity", value) from None


SEVERITY_CONFIG: dict[Severity, StatusStyle] = {
    Severity.CRITICAL: StatusStyle(text="Critical", style="bold red", icon="🔥"),
    Severity.HIGH: StatusStyle(text="High", style="dark_orange", icon="⚠"),
    Severity.MEDIUM: StatusStyle(text="Medium", style="yellow", icon="ℹ"),
    Severity.LOW: StatusStyle(text="Low", style="green", icon="·"),
}


class WebhookStatus(str, Enum):
    NOT_CONFIGURED = "not_configured"
    HEALTHY = "healthy"
    FAILED = "failed"
    UNTESTED = "untested"


@dataclass(frozen=True)
class WebhookStyle:
    text: str
    style: str
    action: str | None  # the follow-up the operator should take, if any


WEBHOOK_STATUS_CONFIG: dict[WebhookStatus, WebhookStyle] = {
    WebhookStatus.NOT_CONFIGURED: WebhookStyle(text="Not configured", style="dim", action="configure"),
    WebhookStatus.HEALTHY: WebhookStyle(text="Healthy", style="green", action=None),
    WebhookStatus.FAILED: WebhookStyle(text="Failing", style="red", action="recreate"),
    WebhookStatus.UNTESTED: WebhookStyle(text="Untested", style="yellow", action="test"),
}


def webhook_status(webhook_id: int | None, last_test_status: str | None) -> WebhookStatus:
    """Derive the displayed webhook state from the stored repository fields."""
    if not webhook_id:
        return WebhookStatus.NOT_CONFIGURED
    if last_test_status == "success":
        return WebhookStatus.HEALTHY
    if last_test_status == "failed":
        return WebhookStatus.FAILED
    return WebhookStatus.UNTESTED
