# re-export common schemas for simpler imports
from .LinkRecord import LinkRecord
from .LinkCreateRequest import LinkCreateRequest
from .LinkCreatedResponse import LinkCreatedResponse

__all__ = [
    "LinkRecord",
    "LinkCreateRequest",
    "LinkCreatedResponse",
]
