"""
Notification delivery for coupon events.

Delivery is fire-and-forget from the engine's point of view: the engines call
the port after state is persisted and only log failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

logger = logging.getLogger(__name__)


class NotificationPort(Protocol):
    def send_coupon_issued(self, email: str, codes: Sequence[str]) -> None: ...

    def send_coupon_redeemed(self, email: str, code: str) -> None: ...


@dataclass(frozen=True, slots=True)
class EmailMessage:
    to: str
    subject: str
    body: str


def render_coupon_issued(email: str, codes: Sequence[str]) -> EmailMessage:
    return EmailMessage(
        to=email,
        subject="Your coupons have arrived!",
        body=f"Congratulations! Here are your coupons: {', '.join(codes)}",
    )


def render_coupon_redeemed(email: str, code: str) -> EmailMessage:
    return EmailMessage(
        to=email,
        subject="Coupon redeemed",
        body=f"Your coupon {code} was applied to your order.",
    )


class LoggingEmailNotifier:
    """
    Mock email delivery that writes each rendered message to the log.

    Sent messages are kept in `outbox` for inspection by the demo script.
    """

    def __init__(self) -> None:
        self.outbox: List[EmailMessage] = []

    def _send(self, message: EmailMessage) -> None:
        self.outbox.append(message)
        logger.info(
            f"Email sent to {message.to}: {message.subject}",
            extra={"email_to": message.to, "email_subject": message.subject, "email_body": message.body},
        )

    def send_coupon_issued(self, email: str, codes: Sequence[str]) -> None:
        self._send(render_coupon_issued(email, codes))

    def send_coupon_redeemed(self, email: str, code: str) -> None:
        self._send(render_coupon_redeemed(email, code))


__all__ = [
    "NotificationPort",
    "EmailMessage",
    "render_coupon_issued",
    "render_coupon_redeemed",
    "LoggingEmailNotifier",
]
