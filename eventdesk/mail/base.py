from __future__ import annotations

from abc import ABC, abstractmethod


class MailDeliveryError(Exception):
    """Raised by a mailer when a message could not be handed off."""


class Mailer(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> None:
        """Deliver a plain-text message or raise MailDeliveryError."""
