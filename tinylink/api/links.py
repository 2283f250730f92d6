from fastapi import APIRouter, Depends, status
from typing import List
import logging

from tinylink.core.config import settings
from tinylink.core.exceptions import Conflict
from tinylink.db.Connection import database
from tinylink.db.store import LinkStore
from tinylink.schemas.LinkRecord import LinkRecord
from tinylink.schemas.LinkCreateRequest import LinkCreateRequest
from tinylink.schemas.LinkCreatedResponse import LinkCreatedResponse
from tinylink.services.shortener import LinkService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/links", tags=["links"])


@router.get("", response_model=List[LinkRecord], response_model_exclude_none=True)
def list_links_endpoint(store: LinkStore = Depends(database.get_store)):
    # Unpaginated: the whole table is returned as-is
    return LinkService.list_links(store)


@router.post("", response_model=LinkCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_link_endpoint(link_request: LinkCreateRequest, store: LinkStore = Depends(database.get_store)):
    try:
        record = LinkService.create_link(
            store,
            link_request.url,
            link_request.code,
            code_length=settings.SHORT_CODE_LENGTH,
            schemes=settings.ALLOWED_URL_SCHEMES,
        )
    except Conflict as e:
        logger.warning(f"Create 409: {e.message}")
        raise

    logger.info(f"API success: Shortened {record.url[:50]}... to {record.code}")
    return LinkCreatedResponse(
        code=record.code,
        url=record.url,
        short_url=f"{settings.BASE_URL.rstrip('/')}/{record.code}",
    )


@router.get("/{code}", response_model=LinkRecord, response_model_exclude_none=True)
def get_link_endpoint(code: str, store: LinkStore = Depends(database.get_store)):
    return LinkService.get_link(store, code)


@router.delete("/{code}")
def delete_link_endpoint(code: str, store: LinkStore = Depends(database.get_store)):
    LinkService.delete_link(store, code)
    return {"success": True}
