# main.py
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Routers
from api_allocation import router as allocation_router
from api_capacity import capacity_router

# -----------------------------
# Env / logging
# -----------------------------
load_dotenv()

LOG_LEVEL = (os.getenv("PLANNER_LOG_LEVEL") or "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("planner")

CORS_ALLOW_ORIGINS = [o.strip() for o in (os.getenv("CORS_ALLOW_ORIGINS") or "*").split(",") if o.strip()]

# -----------------------------
# FastAPI setup
# -----------------------------
app = FastAPI(title="Haul Allocation Planner")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount feature routers
app.include_router(capacity_router)    # /capacity/*, /orders/possible-trips
app.include_router(allocation_router)  # /allocation/validate

logger.info("planner started (log level %s)", LOG_LEVEL)


@app.get("/health")
def health():
    return {
        "ok": True,
        "service": "haul-planner",
        "routes": ["/capacity/open-hours", "/capacity/trips-per-day", "/capacity/plan",
                   "/orders/possible-trips", "/allocation/validate"],
    }
