from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import estimate

logger = logging.getLogger("reservation")

app = FastAPI(
    title="Reservation Estimate",
    description="Running estimate, validation and receipt text for the healing reservation form",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(estimate.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.on_event("startup")
def log_rules():
    """Log which pricing rules the app is serving."""
    rules = estimate.rules
    logger.info(
        "Serving estimates: base fee %d, %d report tiers, %d payment methods",
        rules.base_fee,
        len(rules.flat_reports) + len(rules.per_part_reports),
        len(rules.payment_methods),
    )
