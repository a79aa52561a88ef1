from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smart_fridge.api.routes import router as api_router
from smart_fridge.config import settings
from smart_fridge.logging import configure_logging, get_logger
from smart_fridge.services.llm.dspy_client import configure_dspy
from smart_fridge.storage.db import create_db_and_tables

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("startup: creating tables")
    create_db_and_tables()
    if settings.llm_gateway_url:
        logger.info("startup: recipe text via remote gateway url=%s", settings.llm_gateway_url)
    else:
        configure_dspy()
    yield


app = FastAPI(title="Smart Fridge API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
