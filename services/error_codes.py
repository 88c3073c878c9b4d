"""
Standard error codes for service layer.

These error codes allow callers to programmatically handle specific
refusals without parsing error message text.

Usage:
    from services.error_codes import INSUFFICIENT_PLAYERS
    from services.result import Result

    if len(active) < MIN_ACTIVE_PLAYERS:
        return Result.fail("Need at least 4 active players", code=INSUFFICIENT_PLAYERS)
"""

# General errors
VALIDATION_ERROR = "validation_error"

# Player/roster errors
PLAYER_NOT_FOUND = "player_not_found"
PLAYER_ALREADY_EXISTS = "player_already_exists"
INSUFFICIENT_PLAYERS = "insufficient_players"

# Match errors
MATCH_NOT_FOUND = "match_not_found"
INVALID_TEAMS = "invalid_teams"
INVALID_SCORE = "invalid_score"

# Backup errors
INVALID_BACKUP = "invalid_backup"
