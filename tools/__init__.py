"""
Tools Package
Pure helpers for dose timing, status aggregation, alert rendering and delivery
"""

from .time_window import (
    local_now,
    today,
    parse_scheduled_time,
    dose_deadline,
    is_missed
)

from .adherence_aggregator import (
    MedicationStatus,
    AdherenceSummary,
    build_medication_statuses,
    summarize,
    completion_percentage
)

from .digest_renderer import (
    CaretakerDigest,
    MissedDoseItem,
    RenderedNotification,
    render_missed_dose_alert
)

from .notification_service import (
    NotificationService,
    EmailMessageRequest,
    NotificationResult,
    notification_service
)

from .formatting import (
    format_time,
    format_frequency,
    normalize_time,
    sanitize
)

__all__ = [
    # Time window
    "local_now",
    "today",
    "parse_scheduled_time",
    "dose_deadline",
    "is_missed",

    # Aggregator
    "MedicationStatus",
    "AdherenceSummary",
    "build_medication_statuses",
    "summarize",
    "completion_percentage",

    # Renderer
    "CaretakerDigest",
    "MissedDoseItem",
    "RenderedNotification",
    "render_missed_dose_alert",

    # Notification Service
    "NotificationService",
    "EmailMessageRequest",
    "NotificationResult",
    "notification_service",

    # Formatting
    "format_time",
    "format_frequency",
    "normalize_time",
    "sanitize"
]
