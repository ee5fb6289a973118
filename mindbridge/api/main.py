"""FastAPI application for the conversation memory engine"""

import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from loguru import logger
from pydantic import BaseModel

from mindbridge import __version__
from mindbridge.conversation.memory_manager import ConversationMemoryManager
from mindbridge.core.config import settings
from mindbridge.core.models import (
    ContinuityBridge,
    ConversationContext,
    ConversationStats,
    ConversationTurn,
    EmotionalContext,
    UserPreferences,
)
from mindbridge.storage.sqlite_store import SQLiteLedgerStore


# Global state
store: SQLiteLedgerStore = None
manager: ConversationMemoryManager = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan (startup/shutdown)"""
    global store, manager

    # Startup
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    store = SQLiteLedgerStore(settings.DB_PATH)
    await store.connect()

    manager = ConversationMemoryManager(store)

    yield

    # Shutdown
    await store.close()
    manager = None


app = FastAPI(
    title="MindBridge Conversation Memory",
    description="Cross-session memory and continuity for a wellness companion",
    version=__version__,
    lifespan=lifespan,
)


# Request/Response models
class RecordTurnRequest(BaseModel):
    """One exchange between the user and the companion"""
    user_message: str
    ai_response: str
    emotional_analysis: EmotionalContext
    topics: List[str] = []
    therapeutic_elements: List[Dict[str, Any]] = []


class FeedbackRequest(BaseModel):
    """Feedback about the companion's replies, such as "too long" or "confusing"."""
    feedback: str


class ProgressResponse(BaseModel):
    acknowledgment: str


class StartersResponse(BaseModel):
    starters: List[str]


class PreferencesResponse(BaseModel):
    preferences: UserPreferences
    instructions: str


def _require_manager() -> ConversationMemoryManager:
    if not manager:
        raise HTTPException(status_code=503, detail="Memory manager not initialized")
    return manager


# Endpoints
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "MindBridge Conversation Memory",
        "version": __version__,
        "status": "running",
    }


@app.post("/users/{user_id}/turns", response_model=ConversationTurn)
async def record_turn(user_id: str, request: RecordTurnRequest):
    """
    Record a conversation turn.

    Engagement, phase, emotional shift, triggers and coping strategies are
    derived at record time and returned with the stored turn.
    """
    memory = _require_manager()
    try:
        return await memory.record_conversation_turn(
            user_id,
            request.user_message,
            request.ai_response,
            request.emotional_analysis,
            topics=request.topics,
            therapeutic_elements=request.therapeutic_elements,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/users/{user_id}/feedback", response_model=PreferencesResponse)
async def post_feedback(user_id: str, request: FeedbackRequest):
    """Record feedback on replies and return the updated preferences"""
    memory = _require_manager()
    try:
        await memory.update_preferences_from_feedback(user_id, request.feedback)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return await get_preferences(user_id)


@app.get("/users/{user_id}/bridge", response_model=ContinuityBridge)
async def get_bridge(user_id: str, message: str = ""):
    """Continuity bridge linking past conversations to the current message"""
    return await _require_manager().generate_continuity_bridge(user_id, message)


@app.get("/users/{user_id}/progress", response_model=ProgressResponse)
async def get_progress(user_id: str):
    acknowledgment = await _require_manager().generate_progress_acknowledgment(user_id)
    return ProgressResponse(acknowledgment=acknowledgment)


@app.get("/users/{user_id}/starters", response_model=StartersResponse)
async def get_starters(user_id: str):
    starters = await _require_manager().generate_conversation_starters(user_id)
    return StartersResponse(starters=starters)


@app.get("/users/{user_id}/context", response_model=ConversationContext)
async def get_context(user_id: str, limit: Optional[int] = Query(default=None, ge=0)):
    """Recent turns plus the arc, flow and preferences derived from them"""
    return await _require_manager().get_conversation_context(user_id, limit)


@app.get("/users/{user_id}/stats", response_model=ConversationStats)
async def get_stats(user_id: str):
    return await _require_manager().get_user_conversation_stats(user_id)


@app.get("/users/{user_id}/preferences", response_model=PreferencesResponse)
async def get_preferences(user_id: str):
    memory = _require_manager()
    preferences = await memory.get_user_preferences(user_id)
    instructions = await memory.generate_preference_instructions(user_id)
    return PreferencesResponse(preferences=preferences, instructions=instructions)


@app.delete("/users/{user_id}")
async def delete_user(user_id: str):
    """Discard everything remembered about a user"""
    await _require_manager().clear_user_data(user_id)
    return {"user_id": user_id, "cleared": True}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    if not manager or not store:
        raise HTTPException(status_code=503, detail="System not ready")

    return {"status": "healthy"}
