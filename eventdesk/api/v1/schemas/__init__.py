from eventdesk.api.v1.schemas.auth import (
    LoginIn,
    LoginOut,
    RequestResetIn,
    ResetPasswordIn,
    SignupIn,
    SignupOut,
    UserOut,
)
from eventdesk.api.v1.schemas.events import (
    AttendeeCreate,
    AttendeeOut,
    EventCreate,
    EventCreatedOut,
    EventOut,
    MessageOut,
    RegistrationOut,
)

__all__ = [
    "SignupIn",
    "SignupOut",
    "LoginIn",
    "LoginOut",
    "UserOut",
    "RequestResetIn",
    "ResetPasswordIn",
    "EventCreate",
    "EventCreatedOut",
    "EventOut",
    "AttendeeCreate",
    "AttendeeOut",
    "RegistrationOut",
    "MessageOut",
]
