import logging
from functools import lru_cache

from sqlalchemy import create_engine, event

from tinylink.core.config import settings, Settings
from tinylink.db.store import LinkStore

logger = logging.getLogger(__name__)


def create_sql_engine(database_url: str, **kwargs):
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True, future=True, **kwargs)

    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": 30},
        pool_pre_ping=True,
        future=True,
        **kwargs
    )

    # Take the write lock when the transaction starts so concurrent
    # writers queue on the busy timeout instead of failing to upgrade
    @event.listens_for(engine, "connect")
    def set_sqlite_autocommit(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @event.listens_for(engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_store(config: Settings) -> LinkStore:
    backend = config.STORE_BACKEND.lower()
    if backend == "dynamodb":
        from tinylink.db.dynamo import DynamoLinkStore
        return DynamoLinkStore(
            config.DYNAMO_TABLE,
            region_name=config.AWS_REGION,
            endpoint_url=config.DYNAMO_ENDPOINT_URL,
            create_table=config.DYNAMO_CREATE_TABLE,
        )
    if backend == "sql":
        from tinylink.db.repository import SqlLinkStore
        return SqlLinkStore(create_sql_engine(config.DATABASE_URL))
    raise ValueError(f"Unknown STORE_BACKEND '{config.STORE_BACKEND}' (expected 'dynamodb' or 'sql')")


@lru_cache(maxsize=None)
def get_store() -> LinkStore:
    """Process-wide store handle, built and initialized on first use."""
    store = build_store(settings)
    store.initialize()
    logger.info("Record store ready: backend=%s", settings.STORE_BACKEND)
    return store


def verify_store_connection(store: LinkStore) -> bool:
    if store.ping():
        logger.info("Record store connection verified")
        return True
    logger.warning("Record store connection failed.")
    return False
