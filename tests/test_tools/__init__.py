"""
Test Tools Package
Tests for the tools module (time window, aggregator, digest renderer, email delivery)
"""

__all__ = [
    "test_time_window",
    "test_adherence_aggregator",
    "test_digest_renderer",
    "test_notification_service",
]
