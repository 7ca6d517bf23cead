from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studydeck.config import settings
from studydeck.db import init_all_databases


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.data_dir)
    yield
    from studydeck.services.session_registry import clear_sessions

    clear_sessions()


def create_app() -> FastAPI:
    application = FastAPI(
        title="StudyDeck Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from studydeck.routers import flashcards, health, materials, review

    application.include_router(health.router)
    application.include_router(
        materials.router, prefix="/materials", tags=["materials"]
    )
    application.include_router(
        flashcards.router, prefix="/flashcards", tags=["flashcards"]
    )
    application.include_router(
        review.router, prefix="/review", tags=["review"]
    )

    return application


app = create_app()
