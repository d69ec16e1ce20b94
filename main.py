import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bank import seed_questions
from db import init_db

# Routers
from routers.admin import router as admin_router
from routers.games import router as games_router
from routers.health import router as health_router
from routers.marking import router as marking_router
from routers.questions import router as questions_router

logger = logging.getLogger("quiz-api")
logging.basicConfig(level=logging.INFO)

CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    added = seed_questions()
    logger.info("startup complete (%d new seed questions)", added)
    yield


app = FastAPI(title="Trivia Quiz – Grading API", lifespan=lifespan)

# Allow calls from the quiz front-end dev servers (override with CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-admin-token"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(questions_router)  # /quiz/{category}, /questions/...
app.include_router(marking_router)  # /grade, /mark
app.include_router(games_router)  # /games, /history, /stats
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...
