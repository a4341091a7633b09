from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PASSWORD_TOO_SHORT = "PASSWORD_TOO_SHORT"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    MAIL_SEND_FAILED = "MAIL_SEND_FAILED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    INVALID_SEATS = "INVALID_SEATS"
    INSUFFICIENT_SEATS = "INSUFFICIENT_SEATS"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    CONCURRENT_REGISTRATION = "CONCURRENT_REGISTRATION"
    INTERNAL_ERROR = "INTERNAL_ERROR"
