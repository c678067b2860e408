from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from toolkit_dev.config import load_config
from toolkit_dev.errors import ToolkitError, ToolkitParameterError
from toolkit_dev.model_client import ModelClientError
from toolkit_dev.routers.agent import router as agent_router
from toolkit_dev.routers.chat import router as chat_router
from toolkit_dev.routers.documents import router as documents_router
from toolkit_dev.routers.toolkits import router as toolkits_router
from toolkit_dev.toolkits.registry import SERVER_TOOLKITS


# ----------------------------
# Logging
# ----------------------------

logging.basicConfig(
    level=getattr(logging, load_config().log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("toolkit_dev")


app = FastAPI(
    title="Toolkit Playground",
    version="0.1.0",
)

# Allow CORS from anywhere for now. Adjust in production if needed.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------
# Error handlers
# ----------------------------


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ToolkitError)
async def toolkit_error_handler(request: Request, exc: ToolkitError) -> JSONResponse:
    content = {"error": str(exc)}
    if isinstance(exc, ToolkitParameterError):
        content["details"] = jsonable_encoder(exc.details)
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(ModelClientError)
async def model_client_error_handler(request: Request, exc: ModelClientError) -> JSONResponse:
    logger.error("Model client error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": f"Model client error: {exc}"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ----------------------------
# Health
# ----------------------------

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
def health():
    return {"status": "ok", "toolkits": len(SERVER_TOOLKITS)}


# ----------------------------
# Routers
# ----------------------------

app.include_router(health_router)
app.include_router(agent_router)
app.include_router(toolkits_router)
app.include_router(chat_router)
app.include_router(documents_router)
