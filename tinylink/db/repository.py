from typing import List
from datetime import timezone
import logging

from sqlalchemy import delete, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from tinylink.core.exceptions import Conflict, NotFound, StoreError
from tinylink.db.Models.models import Base, LinkItem
from tinylink.db.store import LinkStore, utcnow
from tinylink.schemas.LinkRecord import LinkRecord

logger = logging.getLogger(__name__)


def _as_utc(value):
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(item: LinkItem) -> LinkRecord:
    return LinkRecord(
        code=item.code,
        url=item.url,
        clicks=item.clicks or 0,
        created_at=_as_utc(item.created_at),
        last_clicked_at=_as_utc(item.last_clicked_at),
    )


class SqlLinkStore(LinkStore):
    """LinkStore backed by a single SQL table through SQLAlchemy."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autoflush=False, bind=engine, future=True)

    def initialize(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("SQL link table initialized/checked.")

    def create(self, code: str, url: str) -> LinkRecord:
        now = utcnow()
        with self.SessionLocal() as db:
            db.add(LinkItem(code=code, url=url, clicks=0, created_at=now))
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning("IntegrityError creating link code=%s: %s", code, e.orig)
                raise Conflict(f"Code '{code}' already exists") from e
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError(f"Failed to create link: {e}") from e
        return LinkRecord(code=code, url=url, clicks=0, created_at=now)

    def get(self, code: str) -> LinkRecord:
        try:
            with self.SessionLocal() as db:
                item = db.get(LinkItem, code)
                if item is None:
                    raise NotFound(f"Link '{code}' not found")
                return _to_record(item)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read link: {e}") from e

    def list(self) -> List[LinkRecord]:
        try:
            with self.SessionLocal() as db:
                return [_to_record(item) for item in db.scalars(select(LinkItem)).all()]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list links: {e}") from e

    def delete(self, code: str) -> None:
        self._write(delete(LinkItem).where(LinkItem.code == code), code)

    def increment_click(self, code: str) -> None:
        stmt = (
            update(LinkItem)
            .where(LinkItem.code == code)
            .values(clicks=LinkItem.clicks + 1, last_clicked_at=utcnow())
        )
        self._write(stmt, code)

    def _write(self, stmt, code: str) -> None:
        # Core statement in its own transaction; rowcount tells us whether
        # the code existed
        try:
            with self.engine.begin() as conn:
                matched = conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update link: {e}") from e
        if matched == 0:
            raise NotFound(f"Link '{code}' not found")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()
