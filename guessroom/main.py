import logging
from contextlib import asynccontextmanager
from pathlib import Path

import anyio
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import (
    DEV,
    HOST,
    LOG_LEVEL,
    PORT,
    ROUND_RULE,
    SELF_PING_INTERVAL_SEC,
    SELF_PING_URL,
    STATIC_DIR,
)
from .dependencies import init_room_manager
from .keepalive import keep_alive, keep_alive_enabled
from .middleware import add_cors_middleware, add_logging_middleware
from .routers import health_router, websocket_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = init_room_manager()
    log.info(f"Room manager ready, round rule: {manager.rule.value}")

    async with anyio.create_task_group() as task_group:
        if keep_alive_enabled(DEV, SELF_PING_URL):
            task_group.start_soon(keep_alive, SELF_PING_URL, SELF_PING_INTERVAL_SEC)
        else:
            log.info("Self-ping disabled")
        yield
        task_group.cancel_scope.cancel()

    log.info("shutting down")


app = FastAPI(title="Guess Room", lifespan=lifespan)
app.add_middleware(add_cors_middleware)
app.add_middleware(add_logging_middleware)

app.include_router(health_router)
app.include_router(websocket_router)

static_dir = Path(STATIC_DIR)
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
else:
    @app.get("/")
    def root():
        return {"service": "guessroom", "rule": ROUND_RULE}


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
