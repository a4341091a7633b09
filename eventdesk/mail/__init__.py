from eventdesk.mail.base import MailDeliveryError, Mailer
from eventdesk.mail.factory import build_mailer

__all__ = ["Mailer", "MailDeliveryError", "build_mailer"]
