from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from conflict_lens.api.mcp_server import mcp
from conflict_lens.api.routes import router as api_router
from conflict_lens.api.widget import STATIC_DIR
from conflict_lens.core.config import get_settings, validate_startup_config

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Validierung beim Startup: ohne API-Key wird kein Request bedient
    validate_startup_config(get_settings())
    async with mcp.session_manager.run():
        yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.include_router(api_router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    # MCP-App zuletzt: bedient /mcp, alles andere ist oben schon geroutet
    app.mount("/", mcp.streamable_http_app())
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    validate_startup_config(settings)
    logger.info("Server running on http://localhost:%s", settings.port)
    logger.info("MCP endpoint: http://localhost:%s/mcp", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
