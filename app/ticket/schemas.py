# app/ticket/schemas.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TicketBase(BaseModel):
    user: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)


class TicketCreate(TicketBase):
    """Server-assigned fields (id, createdAt, updatedAt) are ignored if sent."""


class TicketUpdate(TicketBase):
    """Replaces exactly user and status."""


class TicketOut(TicketBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, **camel_config)


class TicketPage(BaseModel):
    total: int
    page: int
    page_size: int
    data: list[TicketOut]

    model_config = camel_config
