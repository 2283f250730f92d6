from typing import Optional

from fastapi import status


class LinkError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(LinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class NotFound(LinkError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(LinkError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Code exists"


class StoreError(LinkError):
    """Any backend failure that is not a conflict or a missing record."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal"
