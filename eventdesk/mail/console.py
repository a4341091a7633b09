from __future__ import annotations

import structlog

from eventdesk.mail.base import Mailer

logger = structlog.get_logger()


class ConsoleMailer(Mailer):
    """Local development mailer: writes the message to the log instead of sending it."""

    def send(self, to: str, subject: str, body: str) -> None:
        logger.info("mail_console", to=to, subject=subject, body=body)
