import logging

from fastapi import FastAPI

from classbook.core.config import LOG_LEVEL
from classbook.core.logging_middleware import RequestLoggingMiddleware
from classbook.db.init_db import init_db
from classbook.routers.analytics import router as analytics_router
from classbook.routers.grades import router as grades_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Classbook")

# Middleware
app.add_middleware(RequestLoggingMiddleware)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers (paths are defined on the routers themselves)
app.include_router(grades_router, tags=["grades"])
app.include_router(analytics_router, tags=["analytics"])
