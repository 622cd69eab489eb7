import json
import logging
from typing import Union

from fastapi import FastAPI, Depends, Request, WebSocket, WebSocketDisconnect, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlmodel import Session

from .api import products_router, sales_router, inventory_router, users_router
from .core import limiter, settings
from .database import create_db_and_tables, get_session, engine
from .models import utc_now
from .websocket import ConnectionManager

logger = logging.getLogger(__name__)


app = FastAPI(title="EasyMart POS API")

# Relay registry lives on the app; the websocket endpoint reads it from there
app.state.relay = ConnectionManager()

# Setup rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [
        ".".join(str(part) for part in error["loc"] if part != "body")
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Missing or invalid fields: {', '.join(f for f in fields if f) or 'body'}"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("API error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


@app.on_event("startup")
def on_startup():
    create_db_and_tables()
    if settings.SEED_ON_STARTUP:
        from .seed import seed_database
        with Session(engine) as session:
            seed_database(session)


# Request logging middleware
@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    response = await call_next(request)
    if response.status_code >= 500:
        logger.error("%s %s -> %d", request.method, request.url.path, response.status_code)
    return response


def _message_type(message: Union[str, bytes]) -> str:
    try:
        return str(json.loads(message).get("type", "unknown"))
    except (ValueError, AttributeError):
        return "unknown"


# WebSocket relay: every frame, text or binary, is re-sent to all other open connections
@app.websocket("/ws")
async def relay(websocket: WebSocket):
    manager: ConnectionManager = websocket.app.state.relay
    connection_id = await manager.connect(websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000))
            message = frame.get("text")
            if message is None:
                message = frame.get("bytes")
            if message is None:
                continue
            delivered = await manager.broadcast(connection_id, message)
            logger.info(
                "Relay message %s from %s forwarded to %d peer(s)",
                _message_type(message), connection_id, delivered
            )
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(connection_id)


# Include routers
app.include_router(
    products_router,
    prefix=f"{settings.API_PREFIX}/products",
    tags=["Products"]
)
app.include_router(
    sales_router,
    prefix=f"{settings.API_PREFIX}/sales",
    tags=["Sales"]
)
app.include_router(
    inventory_router,
    prefix=f"{settings.API_PREFIX}/inventory",
    tags=["Inventory"]
)
app.include_router(
    users_router,
    prefix=f"{settings.API_PREFIX}/users",
    tags=["Users"]
)


@app.get(f"{settings.API_PREFIX}/health")
def health_check(session: Session = Depends(get_session)):
    session.connection().execute(text("SELECT 1"))
    return {
        "status": "ok",
        "message": "Backend service is running",
        "timestamp": utc_now().isoformat(),
        "database": "connected",
    }


@app.get("/")
def read_root():
    return {"message": "Welcome to EasyMart POS API"}


def run():
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Backend server starting at http://%s:%s", settings.HOST, settings.PORT)
    logger.info("CORS enabled for: %s", ", ".join(settings.cors_origins))
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
