from typing import Iterable, List, Optional
import logging

from tinylink.core.exceptions import InvalidInput, NotFound
from tinylink.db.store import LinkStore
from tinylink.schemas.LinkRecord import LinkRecord
from tinylink.utils.encoding import generate_code, DEFAULT_CODE_LENGTH
from tinylink.utils.validators import is_valid_code, is_valid_url, WEB_SCHEMES


logger = logging.getLogger(__name__)

# Paths served by the app itself that are also valid code shapes
RESERVED_CODES = {"health", "healthz"}


class LinkService:

    @staticmethod
    def create_link(
        store: LinkStore,
        url: Optional[str],
        code: Optional[str] = None,
        code_length: int = DEFAULT_CODE_LENGTH,
        schemes: Optional[Iterable[str]] = WEB_SCHEMES,
    ) -> LinkRecord:
        # Validation happens before any store round trip
        if not is_valid_url(url, schemes):
            raise InvalidInput("Invalid URL")
        if code and not is_valid_code(code):
            raise InvalidInput("Invalid code")
        if code and code in RESERVED_CODES:
            raise InvalidInput(f"'{code}' is a reserved word and cannot be used")
        if not code:
            code = generate_code(code_length)

        # Conflict propagates: the caller picks another code
        record = store.create(code, url)
        logger.info("Created link %s -> %s", code, url[:50])
        return record

    @staticmethod
    def get_link(store: LinkStore, code: str) -> LinkRecord:
        # A code of the wrong shape cannot exist; skip the round trip
        if not is_valid_code(code):
            raise NotFound(f"Link '{code}' not found")
        return store.get(code)

    @staticmethod
    def list_links(store: LinkStore) -> List[LinkRecord]:
        return store.list()

    @staticmethod
    def delete_link(store: LinkStore, code: str) -> None:
        # Existence check first so a missing code is a 404, not a silent success
        LinkService.get_link(store, code)
        store.delete(code)
        logger.info("Deleted link %s", code)
