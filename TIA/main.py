from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Core imports
from packages.tia_core.config import TIAConfig
from packages.tia_core.errors import TIABaseError
from packages.tia_core.logging import get_logger

# API Routers
from TIA.api.adaptive import router as adaptive_router
from TIA.api.health import router as health_router
from TIA.api.session import router as session_router
from TIA.core.error_handler import tia_exception_handler

# Configuration Load
config = TIAConfig.load()
logger = get_logger("tia.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    mode = "openai" if config.llm_enabled else "mock"
    logger.info(f"Starting {config.PROJECT_NAME} v{config.VERSION} (llm={mode})...")

    yield

    # Shutdown
    logger.info("Server shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=config.PROJECT_NAME,
        version=config.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TIABaseError, tia_exception_handler)

    app.include_router(health_router, prefix="", tags=["Status"])
    app.include_router(session_router, prefix="/api")
    app.include_router(adaptive_router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("TIA.main:app", host="0.0.0.0", port=8000, reload=True)
