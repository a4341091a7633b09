from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Configuration is read at import time, so set it before importing the app
_DB_DIR = tempfile.mkdtemp(prefix="eventdesk-tests-")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_DB_DIR}/eventdesk.db")
os.environ.setdefault("DB_TIMEOUT_SECONDS", "30")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_32_chars_minimum!")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("PASSWORD_RESET_URL_BASE", "http://frontend.test/reset")

from eventdesk.db import SessionLocal, engine  # noqa: E402
from eventdesk.mail.base import MailDeliveryError, Mailer  # noqa: E402
from eventdesk.main import create_app  # noqa: E402
from eventdesk.models import Base  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingMailer(Mailer):
    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise MailDeliveryError("smtp unavailable")
        self.sent.append({"to": to, "subject": subject, "body": body})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(clock, mailer):
    return create_app(mailer=mailer, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    # Fresh schema for each test
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
