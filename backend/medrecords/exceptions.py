"""
Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it maps to; ``medrecords.main`` renders
them as ``{"detail": message}``.
"""

from fastapi import status


class RecordsError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(RecordsError):
    """Missing or malformed request fields, unknown kind tag, no search filter."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(RecordsError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreFailure(RecordsError):
    """A statement or transaction failed in the underlying database."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class MalformedResult(RecordsError):
    """A joined row could not be decoded during aggregation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
