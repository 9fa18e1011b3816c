"""
Standard error codes for service layer.

These error codes allow callers to programmatically handle specific error
conditions without parsing error message text.

Usage:
    from services.error_codes import PLAYER_NOT_FOUND
    from services.result import Result

    if player is None:
        return Result.fail("Player not found", code=PLAYER_NOT_FOUND)
"""

# General errors
VALIDATION_ERROR = "validation_error"

# Player errors
PLAYER_NOT_FOUND = "player_not_found"

# Roster errors
INSUFFICIENT_PLAYERS = "insufficient_players"
DUPLICATE_PLAYERS = "duplicate_players"

# Rankings errors
INVALID_PERIOD = "invalid_period"
