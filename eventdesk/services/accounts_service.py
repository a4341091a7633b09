from __future__ import annotations

import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import timedelta

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventdesk.auth.jwt import SessionTokenIssuer
from eventdesk.auth.password import (
    MIN_PASSWORD_LENGTH,
    burn_verification,
    hash_password,
    verify_password,
)
from eventdesk.core.clock import Clock, utc_now
from eventdesk.services.store import store_errors
from eventdesk.mail.base import MailDeliveryError, Mailer
from eventdesk.models import User
from eventdesk.services.error_codes import ErrorCode
from eventdesk.services.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    SendError,
    ValidationError,
)

logger = structlog.get_logger()

RESET_TOKEN_BYTES = 32
RESET_MAIL_SUBJECT = "Password Reset"
RESET_MAIL_BODY = """You are receiving this because you (or someone else) have requested the reset of the password for your account.

Please click on the following link, or paste this into your browser to complete the process:

{link}

If you did not request this, please ignore this email and your password will remain unchanged.
"""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def _hash(password: str) -> str:
    try:
        return hash_password(password)
    except ValueError as exc:
        raise InternalError(ErrorCode.INTERNAL_ERROR.value, "Internal server error") from exc


def _check_password_length(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            ErrorCode.PASSWORD_TOO_SHORT.value,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )


@dataclass(frozen=True)
class SessionGrant:
    """An authenticated user plus the session token to set as a cookie."""

    user: User
    token: str


class CredentialManager:
    """Signup, login and password recovery over the users table.

    Collaborators are injected per request: the DB session, the session token
    issuer (which owns the signing key), the mailer and the clock.
    """

    def __init__(
        self,
        db: Session,
        tokens: SessionTokenIssuer,
        mailer: Mailer,
        *,
        clock: Clock = utc_now,
        reset_url_base: str = "http://localhost:5173/reset",
        reset_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self.db = db
        self.tokens = tokens
        self.mailer = mailer
        self.clock = clock
        self.reset_url_base = reset_url_base.rstrip("/")
        self.reset_ttl = reset_ttl

    def _find_by_email(self, email: str) -> User | None:
        with store_errors(self.db):
            return self.db.scalar(select(User).where(User.email == email))

    def register(self, name: str, email: str, password: str) -> SessionGrant:
        _check_password_length(password)
        email = normalize_email(email)

        if self._find_by_email(email):
            raise ConflictError(ErrorCode.EMAIL_ALREADY_REGISTERED.value, "Email already exists")

        user = User(name=name, email=email, password_hash=_hash(password))
        try:
            with store_errors(self.db):
                self.db.add(user)
                self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(
                ErrorCode.EMAIL_ALREADY_REGISTERED.value, "Email already exists"
            ) from exc

        logger.info("user_registered", user_id=str(user.id))
        return SessionGrant(user=user, token=self.tokens.issue(user.id))

    def authenticate(self, email: str, password: str) -> SessionGrant:
        user = self._find_by_email(normalize_email(email))
        if user is None:
            burn_verification(password)
            logger.info("login_failed", reason="unknown_email")
            raise AuthError(ErrorCode.INVALID_CREDENTIALS.value, "Invalid email or password")
        if not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=str(user.id))
            raise AuthError(ErrorCode.INVALID_CREDENTIALS.value, "Invalid email or password")

        return SessionGrant(user=user, token=self.tokens.issue(user.id))

    def get_user(self, user_id: uuid.UUID) -> User:
        with store_errors(self.db):
            user = self.db.get(User, user_id)
        if not user:
            # A valid signature for a user that no longer exists
            raise AuthError(ErrorCode.INVALID_TOKEN.value, "invalid token")
        return user

    def request_password_reset(self, email: str) -> None:
        user = self._find_by_email(normalize_email(email))
        if not user:
            raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, "User not found")

        raw_token = secrets.token_hex(RESET_TOKEN_BYTES)
        user_id = str(user.id)
        recipient = user.email
        with store_errors(self.db):
            user.reset_password_token_hash = hash_reset_token(raw_token)
            user.reset_password_expires_at = self.clock() + self.reset_ttl
            self.db.add(user)
            self.db.commit()

        logger.info("password_reset_requested", user_id=user_id)

        link = f"{self.reset_url_base}/{raw_token}"
        try:
            self.mailer.send(recipient, RESET_MAIL_SUBJECT, RESET_MAIL_BODY.format(link=link))
        except MailDeliveryError as exc:
            # The stored token stays valid; the user may ask for another mail.
            logger.warning("password_reset_mail_failed", user_id=user_id, error=str(exc))
            raise SendError(ErrorCode.MAIL_SEND_FAILED.value, "Error sending email") from exc

    def complete_password_reset(self, raw_token: str, new_password: str) -> None:
        _check_password_length(new_password)
        token_hash = hash_reset_token(raw_token or "")
        now = self.clock()
        new_hash = _hash(new_password)

        # Match, replace and clear in one statement so a token is consumed at most once.
        with store_errors(self.db):
            result = self.db.execute(
                update(User)
                .where(
                    User.reset_password_token_hash == token_hash,
                    User.reset_password_expires_at > now,
                )
                .values(
                    password_hash=new_hash,
                    reset_password_token_hash=None,
                    reset_password_expires_at=None,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                self.db.commit()
                logger.info("password_reset_completed")
                return

            # Drop an expired token so it cannot linger on the record.
            self.db.execute(
                update(User)
                .where(
                    User.reset_password_token_hash == token_hash,
                    User.reset_password_expires_at <= now,
                )
                .values(reset_password_token_hash=None, reset_password_expires_at=None)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()

        raise AuthError(
            ErrorCode.INVALID_RESET_TOKEN.value,
            "Password reset token is invalid or has expired",
        )
