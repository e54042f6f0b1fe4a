"""Shared helpers for API routes."""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException

# Service-layer ValueError codes and the HTTP response each one maps to
SERVICE_ERRORS: dict[str, tuple[int, str]] = {
    "player_not_found": (404, "Player not found"),
    "season_not_found": (404, "Season not found"),
    "match_not_found": (404, "Match not found"),
    "player_name_taken": (400, "Player name already exists"),
    "username_taken": (400, "Username already exists"),
    "user_not_found": (404, "User not found"),
    "cannot_delete_self": (400, "Cannot delete your own account"),
    "solo_match_uses_two_players": (400, "Solo matches use exactly one player per team"),
    "duplicate_player": (400, "A player cannot appear twice in one match"),
    "tied_score": (400, "Matches cannot end in a tie"),
    "winning_team_mismatch": (400, "Winning team must have the higher score"),
}


def raise_for_service_error(exc: ValueError) -> NoReturn:
    """Translate a known service error into an HTTPException, else re-raise."""
    mapped = SERVICE_ERRORS.get(str(exc))
    if mapped is None:
        raise exc
    status_code, detail = mapped
    raise HTTPException(status_code=status_code, detail=detail) from exc
