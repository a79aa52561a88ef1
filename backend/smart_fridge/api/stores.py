from fastapi import APIRouter, Depends
from sqlmodel import Session

from smart_fridge.api.deps import get_db, get_user
from smart_fridge.schemas.catalog import StoreCreate, StoreRead
from smart_fridge.schemas.user import UserContext
from smart_fridge.storage.repositories import create_store, list_stores

router = APIRouter(prefix="/stores", tags=["stores"])


@router.get("", response_model=list[StoreRead])
def my_stores(user: UserContext = Depends(get_user), session: Session = Depends(get_db)):
    return list_stores(session, user.user_id)


@router.post("", response_model=StoreRead, status_code=201)
def add_store(payload: StoreCreate, user: UserContext = Depends(get_user), session: Session = Depends(get_db)):
    return create_store(session, payload.name, payload.address, user.user_id)
