from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from eventdesk.api.errors import http_error_from_service
from eventdesk.auth.jwt import SessionTokenIssuer
from eventdesk.db import get_db
from eventdesk.mail.base import Mailer
from eventdesk.models import User
from eventdesk.services.accounts_service import CredentialManager
from eventdesk.services.exceptions import ServiceError

DBSession = Annotated[Session, Depends(get_db)]


def get_token_issuer(request: Request) -> SessionTokenIssuer:
    return request.app.state.tokens


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


TokenIssuer = Annotated[SessionTokenIssuer, Depends(get_token_issuer)]


def get_credential_manager(
    request: Request,
    db: DBSession,
    tokens: TokenIssuer,
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> CredentialManager:
    settings = request.app.state.settings
    return CredentialManager(
        db,
        tokens,
        mailer,
        clock=request.app.state.clock,
        reset_url_base=settings.password_reset_url_base,
        reset_ttl=request.app.state.reset_ttl,
    )


Credentials = Annotated[CredentialManager, Depends(get_credential_manager)]


def get_current_user_id(request: Request, tokens: TokenIssuer) -> uuid.UUID:
    token = request.cookies.get(request.app.state.settings.session_cookie_name)
    try:
        return tokens.verify(token)
    except ServiceError as err:
        raise http_error_from_service(err) from err


CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]


def get_current_user(user_id: CurrentUserId, credentials: Credentials) -> User:
    try:
        return credentials.get_user(user_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err


CurrentUser = Annotated[User, Depends(get_current_user)]
