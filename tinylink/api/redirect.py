from fastapi import APIRouter, Depends, status, BackgroundTasks, Request
from fastapi.responses import RedirectResponse
import logging

from tinylink.core.exceptions import NotFound
from tinylink.db.Connection import database
from tinylink.db.store import LinkStore
from tinylink.services.shortener import LinkService
from tinylink.services import metrics

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{code}", tags=["redirect"])
def redirect_to_url_endpoint(code: str, request: Request, background_tasks: BackgroundTasks, store: LinkStore = Depends(database.get_store)):
    """
    Redirect to the link's target URL and count the click after responding.
    """
    try:
        record = LinkService.get_link(store, code)
    except NotFound:
        logger.warning(f"Redirect 404: Short code not found: {code}")
        raise

    metrics.update_stat(request, background_tasks, store, code)
    return RedirectResponse(url=record.url, status_code=status.HTTP_302_FOUND)
