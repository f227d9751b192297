"""Voice Notes backend entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicenotes.api import activity, collaborators, notes, share
from voicenotes.core.settings import get_settings
from voicenotes.db.base import Base
from voicenotes.db.session import engine

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started (%s)", settings.app_name, settings.api_version, settings.environment)
    yield


app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(notes.router)
app.include_router(collaborators.router)
app.include_router(share.router)
app.include_router(activity.router)


@app.get("/")
def read_root():
    return {"app": "Voice Notes backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
