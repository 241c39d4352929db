"""
Newsdesk Backend - Main FastAPI Application
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.encoders import jsonable_encoder
from contextlib import asynccontextmanager
import logging
import time

from newsdesk.config import settings
from newsdesk.exceptions import NewsdeskError, ValidationError
from newsdesk.api.routes import articles, publishers, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# Define lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and identity verifier before serving requests"""
    from newsdesk.services.identity import IdentityVerifier
    from newsdesk.services.store import FirestoreStore, initialize_firebase

    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    firebase_app = initialize_firebase()
    app.state.store = FirestoreStore.from_app(firebase_app)
    app.state.identity_verifier = IdentityVerifier(
        firebase_app, check_revoked=settings.FIREBASE_CHECK_REVOKED
    )
    logger.info("Firestore store and identity verifier ready")

    yield

    logger.info("Shutting down %s", settings.APP_NAME)


# Create FastAPI application with lifespan
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Newsdesk Backend API - article publishing and moderation",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials="*" not in settings.allowed_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(NewsdeskError)
async def newsdesk_exception_handler(request: Request, exc: NewsdeskError):
    """Map domain errors to their HTTP status with a message body"""
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report invalid request bodies and parameters as 400"""
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "error": err.get("msg")}
        for err in exc.errors()
    ]
    fields = ", ".join(e["field"] for e in errors if e["field"])
    message = f"Missing or invalid fields: {fields}" if fields else ValidationError.default_message
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": str(exc) if settings.DEBUG else "Internal server error"},
    )


app.include_router(articles.router)
app.include_router(publishers.router)
app.include_router(users.router)


# Health check endpoint
@app.get("/", tags=["Health"], response_class=PlainTextResponse)
async def root():
    """Liveness check"""
    return "Newspaper FullStack Server is running smoothly!"


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Detailed health check endpoint"""
    store_ready = getattr(request.app.state, "store", None) is not None
    verifier_ready = getattr(request.app.state, "identity_verifier", None) is not None
    return {
        "status": "healthy" if store_ready and verifier_ready else "starting",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "store": store_ready,
        "identity_verifier": verifier_ready,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "newsdesk.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG
    )
