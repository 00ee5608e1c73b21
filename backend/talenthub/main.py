import logging
import sqlite3
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from talenthub.config import settings
from talenthub.errors import setup_error_handlers
from talenthub.routers import applications, auth, jobs, uploads, users

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("talenthub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create schema, upload area, and integrity-check the database
    from talenthub.database import engine, init_db
    from talenthub.utils.filesystem import ensure_data_dirs

    ensure_data_dirs()
    init_db()
    conn = sqlite3.connect(str(settings.db_path))
    result = conn.execute("PRAGMA integrity_check").fetchone()
    conn.close()
    if result and result[0] == "ok":
        logger.info("Database ready at %s", settings.db_path)
    else:
        logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    yield
    logger.info("Shutting down...")
    engine.dispose()


app = FastAPI(
    title="TalentHub",
    description="Job board API for applicants, employers and administrators",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response


setup_error_handlers(app)

app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(applications.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(uploads.router)


@app.get("/health")
async def health():
    return {"status": "ok", "message": "TalentHub API is running"}


def run():
    uvicorn.run(
        "talenthub.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
