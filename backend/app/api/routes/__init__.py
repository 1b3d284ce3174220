from fastapi import APIRouter

from app.api.routes import journal, notes, playbooks, stats, trades

api_router = APIRouter()
api_router.include_router(trades.router)
api_router.include_router(stats.router)
api_router.include_router(journal.router)
api_router.include_router(notes.router)
api_router.include_router(playbooks.router)
