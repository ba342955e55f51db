
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .agents import CompletionAgent
from .config import Settings, load_settings
from .di import chat_request, completion_agent, lifespan
from .exceptions import GatewayError
from .logger import get_logger, setup_logging
from .models import ChatRequest, ChatResponse, ErrorResponse
from .static import mount_spa

logger = get_logger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred on the server."

router = APIRouter()


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_endpoint(
    req: ChatRequest = Depends(chat_request),
    agent: CompletionAgent = Depends(completion_agent),
):
    logger.info("Processing chat request (message length %d)", len(req.message))
    reply = await agent.generate(req.message)
    logger.info("Chat request completed (response length %d)", len(reply))
    return ChatResponse(response=reply)


async def gateway_error_handler(request: Request, exc: GatewayError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def catch_unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": UNEXPECTED_ERROR})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Gemini Chat Gateway", lifespan=lifespan)
    app.state.settings = settings
    # added first, so it sits inside the CORS middleware
    app.middleware("http")(catch_unhandled_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(router)
    if settings.is_production:
        mount_spa(app, settings.static_dir)
    return app


app = create_app()


"""
curl -X POST http://localhost:5000/api/chat \
  -H "Content-Type: application/json" \
  -d '{"message": "Hello, who won the world cup in 2018?"}'
"""


if __name__ == "__main__":
    logger.info("Server is running on port %d", app.state.settings.port)
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
