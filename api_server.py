from __future__ import annotations  # FastAPI server for interview practice sessions

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.proxy import router as proxy_router
from api.routes import records_router, roles_router, router as session_router
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:  # Ensure the records schema exists
    migrate(settings.DB_PATH)
    logger.info("Interview API ready transport=%s db=%s", settings.AI_TRANSPORT, settings.DB_PATH)
    yield


def create_app() -> FastAPI:  # Assemble routers and middleware
    app = FastAPI(title="Interview Practice API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(proxy_router)
    app.include_router(session_router)
    app.include_router(records_router)
    app.include_router(roles_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api_server:app", host="0.0.0.0", port=8000)
