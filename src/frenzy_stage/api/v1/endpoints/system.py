"""System health and statistics endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter

from frenzy_stage.api.v1.dependencies import HubDep, SessionDep
from frenzy_stage.core.settings import settings
from frenzy_stage.models import PlayerInventory
from frenzy_stage.schemas.chat import dump_event

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def get_system_health(db: SessionDep, hub: HubDep) -> dict[str, object]:
    """Report liveness together with chat and game activity counters.

    Args:
        db: Database session
        hub: Chat hub holding the live sessions

    Returns:
        Dictionary with status, server time, connected users, stored
        messages and the number of players with an inventory
    """
    active_players = db.query(PlayerInventory).count() or 0
    return {
        "status": "ok",
        "timestamp": int(time.time() * 1000),
        "connectedUsers": len(hub.registry),
        "totalMessages": len(hub.store),
        "activePlayers": int(active_players),
    }


@router.get("/stats")
async def get_chat_stats(hub: HubDep) -> dict[str, object]:
    """Return a read-only snapshot of chat presence."""
    return {
        "connectedUsers": len(hub.registry),
        "totalMessages": len(hub.store),
        "onlineUsers": [dump_event(user) for user in hub.online_user_stats()],
    }


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return the public chat limits and shop prices.

    Excludes connection strings; suitable for client UIs.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
        "chat": {
            "rate_limit_window_seconds": settings.rate_limit_window_seconds,
            "max_messages_per_window": settings.max_messages_per_window,
            "max_messages_history": settings.max_messages_history,
            "history_replay": settings.chat_history_replay,
        },
        "shop": {
            "bait_price": settings.bait_price,
            "rod_price": settings.rod_price,
        },
    }
