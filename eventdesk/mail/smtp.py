from __future__ import annotations

import smtplib
from email.mime.text import MIMEText

import structlog

from eventdesk.mail.base import MailDeliveryError, Mailer

logger = structlog.get_logger()


class SmtpMailer(Mailer):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        *,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, to: str, subject: str, body: str) -> None:
        message = MIMEText(body, "plain")
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"smtp delivery to {self.host}:{self.port} failed") from exc

        logger.info("mail_sent", to=to, subject=subject)
