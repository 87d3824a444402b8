# app/ticket/services.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.database import StaleRecordError, retry_transient
from app.core.errors import (
    PersistenceFailureError,
    TicketNotFoundError,
    ValidationFailedError,
)
from app.ticket.models import MAX_ID, MIN_ID, Ticket
from app.ticket.schemas import TicketCreate, TicketOut, TicketPage, TicketUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require(field: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationFailedError(f"'{field}' is required and must not be empty")
    return value


def _check_id(ticket_id: int) -> None:
    # ids outside the column range cannot exist and would overflow the driver
    if not MIN_ID <= ticket_id <= MAX_ID:
        raise TicketNotFoundError(ticket_id)


class TicketStore:
    """
    Owns the tickets table and exposes the five ticket operations.

    Every call runs in its own transaction and returns ``TicketOut``
    snapshots, never ORM rows.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Callable[[], datetime] = utcnow,
        default_page_size: int = 10,
        max_page_size: int = 100,
        max_retries: int = 3,
        retry_delay: float = 0.05,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        self._session_factory = session_factory
        self._clock = clock
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    def _run(self, work: Callable[[Session], T]) -> T:
        def attempt() -> T:
            with self._session_factory.begin() as db:
                return work(db)

        try:
            return retry_transient(attempt, self._max_retries, self._retry_delay)
        except (SQLAlchemyError, StaleRecordError) as e:
            logger.error("Ticket persistence failed: %s", e)
            raise PersistenceFailureError() from e

    def list_tickets(self, page: int = 1, page_size: int | None = None) -> TicketPage:
        if page_size is None:
            page_size = self.default_page_size
        if page < 1:
            raise ValidationFailedError("'page' must be >= 1")
        if page_size < 1 or page_size > self.max_page_size:
            raise ValidationFailedError(
                f"'pageSize' must be between 1 and {self.max_page_size}"
            )
        offset = (page - 1) * page_size

        def work(db: Session) -> TicketPage:
            rows = []
            # an offset past the INTEGER range is past the end of any table
            if offset <= MAX_ID:
                rows = db.scalars(
                    select(Ticket)
                    .order_by(Ticket.created_at.desc(), Ticket.id.asc())
                    .offset(offset)
                    .limit(page_size)
                ).all()
            total = db.scalar(select(func.count()).select_from(Ticket))
            return TicketPage(
                total=total,
                page=page,
                page_size=page_size,
                data=[TicketOut.model_validate(r) for r in rows],
            )

        return self._run(work)

    def get(self, ticket_id: int) -> TicketOut:
        _check_id(ticket_id)

        def work(db: Session) -> TicketOut:
            ticket = db.get(Ticket, ticket_id)
            if ticket is None:
                raise TicketNotFoundError(ticket_id)
            return TicketOut.model_validate(ticket)

        return self._run(work)

    def create(self, payload: TicketCreate) -> TicketOut:
        user = _require("user", payload.user)
        status = _require("status", payload.status)

        def work(db: Session) -> TicketOut:
            now = self._clock()
            ticket = Ticket(user=user, status=status, created_at=now, updated_at=now)
            db.add(ticket)
            db.flush()
            return TicketOut.model_validate(ticket)

        created = self._run(work)
        logger.info("Ticket created", extra={"ticket_id": created.id})
        return created

    def update(self, ticket_id: int, payload: TicketUpdate) -> TicketOut:
        user = _require("user", payload.user)
        status = _require("status", payload.status)
        _check_id(ticket_id)

        def work(db: Session) -> TicketOut:
            previous = db.scalar(select(Ticket.updated_at).where(Ticket.id == ticket_id))
            if previous is None:
                raise TicketNotFoundError(ticket_id)
            stamp = max(self._clock(), previous + _TICK)
            result = db.execute(
                update(Ticket)
                .where(Ticket.id == ticket_id, Ticket.updated_at == previous)
                .values(user=user, status=status, updated_at=stamp)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise StaleRecordError(f"ticket {ticket_id} changed during update")
            db.expire_all()
            return TicketOut.model_validate(db.get(Ticket, ticket_id))

        updated = self._run(work)
        logger.info("Ticket updated", extra={"ticket_id": ticket_id})
        return updated

    def delete(self, ticket_id: int) -> None:
        _check_id(ticket_id)

        def work(db: Session) -> None:
            result = db.execute(
                delete(Ticket)
                .where(Ticket.id == ticket_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise TicketNotFoundError(ticket_id)

        self._run(work)
        logger.info("Ticket deleted", extra={"ticket_id": ticket_id})
