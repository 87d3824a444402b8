# app/ticket/routes.py
from fastapi import APIRouter, Depends, Query, Request, Response
from app.ticket.schemas import TicketCreate, TicketOut, TicketPage, TicketUpdate
from app.ticket.services import TicketStore

router = APIRouter(prefix="/tickets", tags=["Tickets"])


# Common store dependency
def get_store(request: Request) -> TicketStore:
    return request.app.state.ticket_store


@router.get("", response_model=TicketPage)
def list_all(
    page: int = Query(default=1, description="1-based page number"),
    page_size: int | None = Query(default=None, alias="pageSize"),
    store: TicketStore = Depends(get_store),
):
    return store.list_tickets(page, page_size)


@router.post("", response_model=TicketOut, status_code=201)
def create(
    ticket: TicketCreate,
    request: Request,
    response: Response,
    store: TicketStore = Depends(get_store),
):
    created = store.create(ticket)
    response.headers["Location"] = str(request.url_for("get_ticket", ticket_id=created.id))
    return created


@router.get("/{ticket_id}", response_model=TicketOut, name="get_ticket")
def get(ticket_id: int, store: TicketStore = Depends(get_store)):
    return store.get(ticket_id)


@router.put("/{ticket_id}", response_model=TicketOut)
def update(ticket_id: int, ticket: TicketUpdate, store: TicketStore = Depends(get_store)):
    return store.update(ticket_id, ticket)


@router.delete("/{ticket_id}", status_code=204)
def delete(ticket_id: int, store: TicketStore = Depends(get_store)):
    store.delete(ticket_id)
    return Response(status_code=204)
