from __future__ import annotations

from eventdesk.core.config import Settings
from eventdesk.mail.base import Mailer
from eventdesk.mail.console import ConsoleMailer
from eventdesk.mail.smtp import SmtpMailer


def build_mailer(settings: Settings) -> Mailer:
    if settings.smtp_host:
        return SmtpMailer(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )
    if settings.is_dev:
        return ConsoleMailer()
    raise RuntimeError("SMTP_HOST must be set outside local/test environments")
