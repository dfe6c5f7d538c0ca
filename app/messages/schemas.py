# app/messages/schemas.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime


class CounterpartProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    first_name: str
    last_name: str
    phone: str


class MessageBase(BaseModel):
    id: int
    body: str
    sent_at: datetime
    read_at: datetime | None = None


class SentMessage(MessageBase):
    to_user: CounterpartProfile


class ReceivedMessage(MessageBase):
    from_user: CounterpartProfile


class SentMessagesOut(BaseModel):
    messages: list[SentMessage]


class ReceivedMessagesOut(BaseModel):
    messages: list[ReceivedMessage]
