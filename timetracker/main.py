import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from sqlalchemy import text

from timetracker.config import settings
from timetracker.database import engine
from timetracker.models import Base
from timetracker.services.ticker import TickerRegistry
from timetracker.services.tracker_service import TrackerService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize Sentry
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.2 if settings.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: verify DB connection and make sure the tables exist
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if settings.AUTO_CREATE_TABLES:
            await conn.run_sync(Base.metadata.create_all)

    app.state.tracker = TrackerService(
        tickers=TickerRegistry(interval=settings.TICK_INTERVAL_SECONDS),
    )
    logger.info("Time tracker started (%s)", settings.ENVIRONMENT)

    yield

    # Shutdown
    app.state.tracker.tickers.cancel_all()
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_TITLE,
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from timetracker.middleware.error_handler import register_error_handlers  # noqa: E402

register_error_handlers(app)

# Routers
from timetracker.routers.segments import router as segments_router  # noqa: E402
from timetracker.routers.summary import router as summary_router  # noqa: E402
from timetracker.routers.tracker import router as tracker_router  # noqa: E402
from timetracker.routers.views import router as views_router  # noqa: E402

app.include_router(segments_router)
app.include_router(views_router)
app.include_router(tracker_router)
app.include_router(summary_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
