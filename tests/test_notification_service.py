"""
Tests for `services/notification_service.py`.
"""

import logging

import pytest

from services.notification_service import LoggingEmailNotifier, render_coupon_issued


def test_issued_message_lists_every_code() -> None:
    message = render_coupon_issued("a@example.com", ["CPNAAAAAAAA", "CPNBBBBBBBB"])

    assert message.to == "a@example.com"
    assert message.subject == "Your coupons have arrived!"
    assert "CPNAAAAAAAA, CPNBBBBBBBB" in message.body


def test_logging_notifier_records_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    notifier = LoggingEmailNotifier()

    with caplog.at_level(logging.INFO, logger="services.notification_service"):
        notifier.send_coupon_redeemed("a@example.com", "CPNAAAAAAAA")

    assert len(notifier.outbox) == 1
    assert "CPNAAAAAAAA" in notifier.outbox[0].body
    assert "Email sent to a@example.com" in caplog.text
