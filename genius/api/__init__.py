"""API routes mounted under /api."""

from fastapi import APIRouter

from genius.api import auth, chat, db, health

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(db.router, prefix="/db", tags=["db"])
router.include_router(chat.router, prefix="/chat", tags=["chat"])
router.include_router(health.router, prefix="/health", tags=["health"])
