from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from filterforge.api import exclusions_router, health_router
from filterforge.config import settings
from filterforge.exclusion import get_rules


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    get_rules()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("filterforge"),
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(exclusions_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Browser extension origins vary per install
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
