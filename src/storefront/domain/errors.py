from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONNECTION = "connection"
    MALFORMED_INPUT = "malformed_input"
    QUERY = "query"
    LOGICAL = "logical"


class AppError(Exception):
    """Base app error."""

    kind: ErrorKind = ErrorKind.LOGICAL


class DatabaseConnectionError(AppError):
    kind = ErrorKind.CONNECTION


class MalformedInputError(AppError):
    kind = ErrorKind.MALFORMED_INPUT


class QueryError(AppError):
    kind = ErrorKind.QUERY


class ValidationError(AppError):
    pass


class NotFoundError(AppError):
    pass


class AuthorizationError(AppError):
    pass


class OutOfRangeError(AppError):
    pass
