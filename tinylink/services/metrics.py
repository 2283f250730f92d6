from tinylink.core.exceptions import NotFound
from tinylink.db.store import LinkStore
import logging

logger = logging.getLogger(__name__)


def record_click(store: LinkStore, code: str):
        # Best effort: a failed counter update never reaches the visitor
        try:
                store.increment_click(code)
                logger.info("metrics.record_click: click counted for %s", code)
        except NotFound:
                logger.info("metrics.record_click: %s was deleted before the click was counted", code)
        except Exception:
                logger.exception("metrics.record_click: failed to update counters for %s", code)

def update_stat(request, background_tasks, store, code):
    if not getattr(request.state, "metrics_scheduled", False):
        background_tasks.add_task(record_click, store, code)
        request.state.metrics_scheduled = True
