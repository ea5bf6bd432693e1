"""
FastAPI application
ShareSathi API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from sharesathi.config import settings
from sharesathi.database import SessionLocal, init_db
from sharesathi.logging_config import setup_logging

# Logging first, before the rest of the package is imported
setup_logging(
    log_level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
    log_to_file=settings.LOG_TO_FILE,
)

from sharesathi.exceptions import ShareSathiException
from sharesathi.routers import (
    watchlist_router,
    settings_router,
    stock_router,
    timemachine_router,
    stocks_router,
    market_router,
    search_router,
    news_router,
    chat_router,
    learn_router,
)
from sharesathi.services.quote_cache import quote_cache
from sharesathi.services.settings_service import SettingsStore
from sharesathi.services.storage_service import KeyValueStorage
from sharesathi.services.watchlist_service import WatchlistStore
from sharesathi.utils.market_hours import get_market_status, get_market_status_text

# Scheduler
from apscheduler.schedulers.asyncio import AsyncIOScheduler

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


# ============================================================
# Scheduled jobs
# ============================================================

def purge_quote_cache():
    """Scheduled job: drop expired quotes"""
    removed = quote_cache.purge_expired()
    if removed:
        logger.debug(f"[scheduler] purged {removed} expired quotes, {len(quote_cache)} left")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    init_db()
    logger.info("Database initialized")

    storage = KeyValueStorage(SessionLocal)
    app.state.watchlist_store = WatchlistStore(storage)
    app.state.watchlist_store.load()
    app.state.settings_store = SettingsStore(storage)
    app.state.settings_store.load()

    scheduler.add_job(
        purge_quote_cache,
        'interval',
        minutes=settings.CACHE_PURGE_MINUTES,
        id='quote_cache_purge',
        name=f'Quote cache purge (every {settings.CACHE_PURGE_MINUTES} min)',
    )
    scheduler.start()
    logger.info("Scheduler started")

    yield

    scheduler.shutdown()
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## ShareSathi API

Indian stock market dashboard

### Features

- **Watchlists**: up to 10 lists of 50 stocks, with a curated Top Picks list
- **Quotes**: live BSE / NSE prices with 1D to 10Y change
- **Time machine**: what a past investment would be worth today, with CAGR
- **Market**: SENSEX, NIFTY 50, index constituents and all BSE stocks
- **News, learn and chat**: headlines, articles and an investing assistant
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ShareSathiException)
async def sharesathi_exception_handler(request: Request, exc: ShareSathiException):
    """Every domain error becomes the same JSON envelope"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.error_code} {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"code": exc.error_code, "message": exc.message},
        },
    )


# Routers
app.include_router(watchlist_router)
app.include_router(settings_router)
app.include_router(stock_router)
app.include_router(timemachine_router)
app.include_router(stocks_router)
app.include_router(market_router)
app.include_router(search_router)
app.include_router(news_router)
app.include_router(chat_router)
app.include_router(learn_router)


@app.get("/api", tags=["System"])
async def api_root():
    """API root"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", tags=["System"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
    }


@app.get("/api/admin/scheduler-status", tags=["Admin"])
async def scheduler_status():
    """Scheduler jobs and current market status"""
    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
        })

    return {
        "running": scheduler.running,
        "jobs": jobs,
        "cached_quotes": len(quote_cache),
        "market_status": {
            "status": get_market_status(),
            "text": get_market_status_text(),
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sharesathi.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
