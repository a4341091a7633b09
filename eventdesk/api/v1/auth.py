from __future__ import annotations

from fastapi import APIRouter, Request, Response

from eventdesk.api.errors import http_error_from_service
from eventdesk.api.v1.schemas import (
    LoginIn,
    LoginOut,
    MessageOut,
    RequestResetIn,
    ResetPasswordIn,
    SignupIn,
    SignupOut,
)
from eventdesk.auth.deps import Credentials
from eventdesk.services.exceptions import ServiceError

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(request: Request, response: Response, token: str) -> None:
    settings = request.app.state.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
        max_age=request.app.state.tokens.max_age_seconds,
        path="/",
    )


@router.post("/signup", response_model=SignupOut, status_code=201)
def signup(payload: SignupIn, request: Request, response: Response, credentials: Credentials):
    try:
        grant = credentials.register(payload.name, payload.email, payload.password)
    except ServiceError as err:
        raise http_error_from_service(err) from err

    _set_session_cookie(request, response, grant.token)
    return SignupOut(id=grant.user.id, name=grant.user.name, email=grant.user.email)


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, request: Request, response: Response, credentials: Credentials):
    try:
        grant = credentials.authenticate(payload.email, payload.password)
    except ServiceError as err:
        raise http_error_from_service(err) from err

    _set_session_cookie(request, response, grant.token)
    return LoginOut(id=grant.user.id, name=grant.user.name, email=grant.user.email)


@router.post("/logout", response_model=MessageOut)
def logout(request: Request, response: Response):
    settings = request.app.state.settings
    # Overwrite with an empty, already-expired cookie
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="strict",
    )
    return MessageOut(message="Logged Out")


@router.post("/request-reset", response_model=MessageOut)
def request_reset(payload: RequestResetIn, credentials: Credentials):
    try:
        credentials.request_password_reset(payload.email)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return MessageOut(message="Recovery email sent")


@router.post("/reset/{token}", response_model=MessageOut)
def reset_password(token: str, payload: ResetPasswordIn, credentials: Credentials):
    try:
        credentials.complete_password_reset(token, payload.password)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return MessageOut(message="Password has been updated")
