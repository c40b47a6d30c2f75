'''
FastAPI application: lifespan (database + rollover scheduler), CORS and routers.
'''
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .database.engine import create_db_engine_and_session_factory, create_tables, dispose_db_engine
from .services.scheduler import RolloverScheduler
from .common.logger import log
from .common.config import settings
from .api import auth, voting

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    # --- On App Startup ---
    log.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    create_db_engine_and_session_factory()
    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables()

    scheduler = None
    if settings.SCHEDULER_ENABLED and not settings.TEST_MODE:
        scheduler = RolloverScheduler()
        scheduler.start()
    else:
        log.info("Rollover scheduler disabled.")

    yield # --- Application is now running ---

    # --- On App Shutdown ---
    log.info("Application lifespan shutdown...")
    if scheduler is not None:
        scheduler.stop()
    await dispose_db_engine()


# ---- CREATING THE APP ----
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan

)

# --- Add CORS Middleware ---
origins = [
    # URL of testing frontend
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
]

# Extend with environment-specific origins
origins.extend(settings.BACKEND_CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    # List of origins allowed (or "*" for all)
    allow_origins=origins,
    # Allow cookies to be included
    allow_credentials=True,
    # Allow all methods (GET, POST, etc.)
    allow_methods=["*"],
    # Allow all headers
    allow_headers=["*"],
    # The frontend reads the Authorization header back
    expose_headers=["Authorization"],
    # Cache preflight responses for an hour
    max_age=3600,)
# --- End of CORS Middleware ---

@app.get("/")
async def health_check():
    return {"status": "ok", "message": f"{settings.APP_NAME} is running"}

app.include_router(auth.router)
app.include_router(voting.router)
