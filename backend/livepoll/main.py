import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from livepoll.core.broadcaster import Broadcaster
from livepoll.core.config import Settings, settings as default_settings
from livepoll.core.exceptions import NotFoundError, ValidationError
from livepoll.core.logging_config import setup_logging
from livepoll.routes import polls, websocket
from livepoll.services.poll_gateway import PollGateway
from livepoll.services.poll_store import PollStore

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        # integer parts are list positions or, for bad JSON, character offsets
        field = ".".join(str(part) for part in err["loc"][1:] if not isinstance(part, int)) or "body"
        problems.append(f"{field}: {err['msg']}")
    return _error(status.HTTP_400_BAD_REQUEST, "; ".join(problems))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"LivePoll starting ({settings.ENV})")
        yield
        logger.info(f"LivePoll stopping with {len(app.state.store)} polls in memory")

    app = FastAPI(title="LivePoll API", version="1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = PollStore()
    app.state.broadcaster = Broadcaster(app.state.store)
    app.state.gateway = PollGateway(app.state.store, app.state.broadcaster)

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(polls.router)
    app.include_router(websocket.router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "ok",
            "polls": len(app.state.store),
            "rooms": app.state.broadcaster.room_count,
        }

    return app


app = create_app()


def run() -> None:
    setup_logging(default_settings.LOG_LEVEL)
    uvicorn.run(app, host=default_settings.APP_HOST, port=default_settings.PORT)
