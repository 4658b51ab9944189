from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from cago.config import get_settings
from cago.middleware.correlation import CorrelationMiddleware
from cago.middleware.rate_limit import limiter
from cago.routes import coaching, meetings, webhooks, readai
from cago.utils.errors import CagoError
from cago.utils.logger import logger
from cago.utils.metrics import get_snapshot

settings = get_settings()

app = FastAPI(title=settings.app_name, version=settings.app_version)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS - Explicit origins from config
allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Correlation-ID"],
)
app.add_middleware(CorrelationMiddleware)


# Every error leaves as {"error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(CagoError)
async def cago_error_handler(request: Request, exc: CagoError):
    if exc.status_code >= 500:
        # Internal detail stays in the logs
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"error": type(exc).message})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Something went wrong. Please try again."})


@app.on_event("startup")
async def startup_event():
    provider = "canned (TEST_MODE)" if settings.test_mode else settings.llm_provider
    logger.info(f"Starting Cago API (provider: {provider})")
    logger.info(f"Backend ready at http://{settings.backend_host}:{settings.backend_port}")


# Health check endpoint (minimal response to prevent information disclosure)
@app.get("/api/health")
async def health_check():
    return {"status": "ok"}


@app.get("/")
async def root():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    return get_snapshot()


# Register routes
app.include_router(coaching.router)
app.include_router(meetings.router)
app.include_router(webhooks.router)
app.include_router(readai.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cago.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.debug
    )
