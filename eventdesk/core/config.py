import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


def _csv(val: str | None, default: list[str]) -> list[str]:
    if not val:
        return default
    return [v.strip() for v in val.split(",") if v.strip()]


@dataclass(frozen=True)
class Settings:
    env: str = os.getenv("ENV", "local")

    # DB / Redis
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./eventdesk.db")
    db_timeout_seconds: float = float(os.getenv("DB_TIMEOUT_SECONDS", "10"))
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Session tokens
    jwt_secret: str | None = os.getenv("JWT_SECRET") or None
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    jwt_issuer: str = os.getenv("JWT_ISSUER", "eventdesk")
    session_token_ttl_days: int = int(os.getenv("SESSION_TOKEN_TTL_DAYS", "5"))
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "token")
    session_cookie_secure: bool = _bool(os.getenv("SESSION_COOKIE_SECURE"), default=False)

    # Password reset
    password_reset_ttl_seconds: int = int(os.getenv("PASSWORD_RESET_TTL_SECONDS", "3600"))
    password_reset_url_base: str = os.getenv(
        "PASSWORD_RESET_URL_BASE",
        "http://localhost:5173/reset",
    )

    # Outgoing mail
    smtp_host: str | None = os.getenv("SMTP_HOST") or None
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_username: str | None = os.getenv("SMTP_USERNAME") or None
    smtp_password: str | None = os.getenv("SMTP_PASSWORD") or None
    smtp_sender: str = os.getenv("SMTP_SENDER", "no-reply@eventdesk.local")
    smtp_use_tls: bool = _bool(os.getenv("SMTP_USE_TLS"), default=True)
    smtp_timeout_seconds: float = float(os.getenv("SMTP_TIMEOUT_SECONDS", "10"))

    # CORS
    cors_allow_origins: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("CORS_ALLOW_ORIGINS"),
            default=["http://localhost:5173", "http://127.0.0.1:5173"],
        )
    )

    # Security headers
    security_headers_enabled: bool = _bool(
        os.getenv("SECURITY_HEADERS_ENABLED"),
        default=True,
    )

    # Prometheus /metrics
    metrics_enabled: bool = _bool(os.getenv("METRICS_ENABLED"), default=True)

    # Rate limiting
    rate_limit_enabled: bool = _bool(os.getenv("RATE_LIMIT_ENABLED"), default=True)
    rate_limit_default: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
    rate_limit_exempt_paths: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("RATE_LIMIT_EXEMPT_PATHS"),
            default=["/health", "/metrics"],
        )
    )

    @property
    def is_dev(self) -> bool:
        return self.env in {"local", "test"}


settings = Settings()
