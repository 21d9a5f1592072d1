from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spendo.api.routers import api_router
from spendo.core.config import settings
from spendo.db.init_db import ensure_schema
from spendo.db.session import SessionLocal

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger("spendo")

app = FastAPI(title="Spendo API")

origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.on_event("startup")
def on_startup() -> None:
    db = SessionLocal()
    try:
        ensure_schema(db)
    finally:
        db.close()
    logger.info("Spendo API started")
