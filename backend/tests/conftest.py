import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from smart_fridge import main
from smart_fridge.api import deps
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import GatewayError
from smart_fridge.services.llm.prompt_builder import resolve_prompt
from smart_fridge.storage import db as db_module
from smart_fridge.storage import models  # noqa: F401
from smart_fridge.storage.models import Ingredient

USER_ID = "user-1"

SAMPLE_RESPONSE = """RECIPE:
Title: Pad Krapow Gai
Match: 67%
Available Ingredients:
- 200 g chicken
- 2 cloves garlic
Missing Ingredients:
- 1 bunch holy basil
Instructions:
1. Fry the garlic
2. Add the chicken and basil
Cooking Time: 20 minutes
Difficulty: easy

RECIPE:
Title: Garlic Rice
Match: 100%
Available Ingredients:
- 1 cup rice
- 2 cloves garlic
Instructions:
1. Cook the rice
Cooking Time: 25 minutes
Difficulty: easy
"""


class FakeGateway:
    """Records requests and replays a canned answer (or raises)."""

    name = "fake"

    def __init__(self, text: str = SAMPLE_RESPONSE, error: str | None = None) -> None:
        self.text = text
        self.error = error
        self.requests = []

    def generate(self, request):
        prompt = resolve_prompt(request)
        self.requests.append(prompt)
        if self.error:
            raise GatewayError(self.error)
        return self.text


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="user")
def user_fixture():
    return UserContext(user_id=USER_ID)


@pytest.fixture(name="pantry")
def pantry_fixture(session):
    soon = date.today() + timedelta(days=2)
    items = [
        Ingredient(user_id=USER_ID, name="Chicken", quantity=500, unit="g", category="Meat", expiry_date=soon),
        Ingredient(user_id=USER_ID, name="garlic", quantity=6, unit="cloves", category="Vegetables"),
        Ingredient(user_id=USER_ID, name="Rice", quantity=1, unit="kg", category="Grains"),
    ]
    for item in items:
        session.add(item)
    session.commit()
    return items


@pytest.fixture(name="gateway")
def gateway_fixture():
    return FakeGateway()


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine, gateway):
    def _get_session_override():
        return Session(engine)

    monkeypatch.setattr(db_module, "engine", engine)
    monkeypatch.setattr(db_module, "get_session", _get_session_override)
    monkeypatch.setattr(main, "configure_dspy", lambda: None)
    main.app.dependency_overrides[deps.get_text_gateway] = lambda: gateway

    client = TestClient(main.app, headers={"X-User-Id": USER_ID})
    yield client
    main.app.dependency_overrides.clear()
