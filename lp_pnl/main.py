from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lp_pnl.api.routers.positions import router as positions_router
from lp_pnl.shared.config import get_settings


settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="LP P&L API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(positions_router)


@app.get("/")
def root() -> str:
    return "LP P&L API is running"


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


logger.info("main: app ready log_level=%s", settings.log_level)
