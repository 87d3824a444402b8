# app/core/database.py
import logging
import time
from typing import Callable, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

Base = declarative_base()


class StaleRecordError(Exception):
    """A conditional write matched no row because the record changed underneath it."""


TRANSIENT_ERRORS = (OperationalError, StaleRecordError)


def build_engine(settings: Settings) -> Engine:
    url = settings.DATABASE_URL
    if not url.startswith("sqlite"):
        return create_engine(url)

    connect_args = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    # models must be imported so their tables are registered on Base
    from app.ticket import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def retry_transient(
    operation: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 0.05,
) -> T:
    # base_delay doubles per retry; non-transient errors propagate at once
    for attempt in range(max_retries):
        try:
            return operation()
        except TRANSIENT_ERRORS as e:
            if attempt >= max_retries - 1:
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                "Transient persistence error (attempt %d/%d), retrying in %.2fs: %s",
                attempt + 1,
                max_retries,
                delay,
                e,
            )
            time.sleep(delay)

    raise RuntimeError("Retry logic failed unexpectedly")
