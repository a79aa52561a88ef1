from typing import Iterator

from fastapi import Header, HTTPException
from sqlmodel import Session

from smart_fridge.schemas.user import UserContext
from smart_fridge.services.llm.gateway import TextGateway, get_gateway
from smart_fridge.storage import db


def get_db() -> Iterator[Session]:
    with db.get_session() as session:
        yield session


def get_user(x_user_id: str | None = Header(default=None)) -> UserContext:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return UserContext(user_id=x_user_id.strip())


def get_text_gateway() -> TextGateway:
    return get_gateway()
