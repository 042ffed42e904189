from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from learning.errors import (
    LearningError,
    NoActiveSession,
    QuotaExhausted,
    RateLimited,
    StaleGeneration,
    TransportError,
    ValidationError,
)
from quickstudy.config import create_db
from quickstudy.routes.auth_routes import auth_routes
from quickstudy.routes.learn_routes import learn_routes
from quickstudy.routes.profile_routes import profile_routes
from quickstudy.utils.logger import clear_request_id, configure_logging, set_request_id

logger = configure_logging()

# Most specific first: MalformedContent is both a GenerationError and a ValidationError.
ERROR_STATUS: list[tuple[type[LearningError], int]] = [
    (RateLimited, 429),
    (QuotaExhausted, 402),
    (TransportError, 502),
    (ValidationError, 422),
    (NoActiveSession, 404),
    (StaleGeneration, 409),
]


def status_for(exc: LearningError) -> int:
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db()
    yield


app = FastAPI(title="quickstudy", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    try:
        logger.info("request start method=%s path=%s client=%s", request.method, request.url.path, request.client)
        response: Response = await call_next(request)
        logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        response.headers["x-request-id"] = rid
        return response
    except Exception:
        logger.exception("request error method=%s path=%s", request.method, request.url.path)
        raise
    finally:
        clear_request_id()


@app.exception_handler(LearningError)
async def learning_error_handler(request: Request, exc: LearningError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("learning error status=%s kind=%s method=%s path=%s detail=%s", status_code, exc.kind, request.method, request.url.path, exc.message)
    else:
        logger.warning("learning error status=%s kind=%s method=%s path=%s detail=%s", status_code, exc.kind, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "error": exc.kind})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    # Log server-side errors with stack traces; client errors as warnings.
    if exc.status_code >= 500:
        logger.exception("http error status=%s method=%s path=%s detail=\n%s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("http error status=%s method=%s path=%s detail=\n%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=\n%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "quickstudy is Healthy"}

app.include_router(auth_routes, prefix="/auth")
app.include_router(profile_routes)
app.include_router(learn_routes, prefix="/learn")

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
