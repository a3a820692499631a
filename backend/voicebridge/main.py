# /backend/voicebridge/main.py

from __future__ import annotations
import logging
import os
from dotenv import load_dotenv
load_dotenv(dotenv_path=os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"))

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicebridge.api.routers import auth, bridge, guides, kids, therapy, tts, user
from voicebridge.config import cors_origins, log_level
from voicebridge.db import init_models
from voicebridge.errors import register_exception_handlers

logging.basicConfig(
    level=log_level(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info("VoiceBridge API ready")
    yield


app = FastAPI(
    title="VoiceBridge AI API",
    lifespan=lifespan,
)

# CORS goes first so every route, including error responses, carries the headers.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(bridge.router)
app.include_router(guides.router)
app.include_router(kids.router)
app.include_router(therapy.router)
app.include_router(tts.router)
app.include_router(user.router)


@app.get("/health")
async def health():
    return {"ok": True}
