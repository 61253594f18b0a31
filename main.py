import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.cache import QuotaExceeded
from core.error_responses import ErrorCode, error_from_exception, make_error, make_errors
from core.errors import ScoringInputError
from core.structured_logging import RequestCorrelationMiddleware, configure_structured_logging, get_request_id
from env_config import Config
from recommendation_engine import build_engine
from routers import grading_router

configure_structured_logging(level=Config.LOG_LEVEL, format_type=Config.LOG_FORMAT, engine_version=Config.ENGINE_VERSION)
Config.log_status()

logger = logging.getLogger(__name__)

app = FastAPI(title="Pick Grading API", version=Config.API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestCorrelationMiddleware)

app.state.engine = build_engine(Config)
app.include_router(grading_router)


@app.exception_handler(ScoringInputError)
async def scoring_input_error_handler(request: Request, exc: ScoringInputError):
    logger.info("Rejected scoring input on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content=error_from_exception(exc, request_id=get_request_id()))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "code": ErrorCode.VALIDATION_ERROR,
            "message": err.get("msg", "Invalid request"),
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body") or None,
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=make_errors(errors, request_id=get_request_id()))


@app.exception_handler(QuotaExceeded)
async def quota_exceeded_handler(request: Request, exc: QuotaExceeded):
    return JSONResponse(
        status_code=429,
        content=make_error(ErrorCode.QUOTA_EXCEEDED, str(exc), request_id=get_request_id()),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=make_error(ErrorCode.INTERNAL_ERROR, "Internal server error", request_id=get_request_id()),
    )


@app.get("/")
def root():
    return {
        "status": "online",
        "message": "Pick Grading API",
        "version": Config.API_VERSION,
        "engine_version": Config.ENGINE_VERSION,
    }


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
