"""
Input validation for roster and schedule changes.

Validators return a list of messages (empty when valid); the ``ensure_*``
helpers raise the matching ``ValidationError`` so callers can reject input
before touching any state.
"""
from datetime import date, time
from typing import Any, List, Optional

from ..utils import TEAM_SIDES
from .errors import GameValidationError, PlayerValidationError, ValidationError

MAX_NAME_LENGTH = 100
MAX_NUMBER_LENGTH = 3


def text_field_errors(**fields: Any) -> List[str]:
    """Messages for values that must be text (or None) but are not."""
    return [
        f"{name.replace('_', ' ').capitalize()} must be text"
        for name, value in fields.items()
        if value is not None and not isinstance(value, str)
    ]


def ensure_text_fields(**fields: Any) -> None:
    errors = text_field_errors(**fields)
    if errors:
        raise ValidationError(errors)


def validate_player_details(first_name: str, last_name: str, number: Optional[str] = None) -> List[str]:
    """
    Validate player fields.

    At least one of first or last name is required.

    Returns:
        List of validation error messages (empty if valid)
    """
    type_errors = text_field_errors(first_name=first_name, last_name=last_name, number=number)
    if type_errors:
        return type_errors
    errors = []
    first = (first_name or "").strip()
    last = (last_name or "").strip()

    if not first and not last:
        errors.append("Please enter at least a first or last name")
    if len(first) > MAX_NAME_LENGTH or len(last) > MAX_NAME_LENGTH:
        errors.append(f"Names must be at most {MAX_NAME_LENGTH} characters")
    if number and len(number.strip()) > MAX_NUMBER_LENGTH:
        errors.append(f"Jersey number must be at most {MAX_NUMBER_LENGTH} characters")
    return errors


def validate_game_details(
    opponent: str,
    game_date: Optional[date],
    location: str,
    game_time: Optional[time] = None,
    season: Optional[str] = None,
    competition: Optional[str] = None,
) -> List[str]:
    """
    Validate game scheduling fields.

    Returns:
        List of validation error messages (empty if valid)
    """
    type_errors = text_field_errors(opponent=opponent, season=season, competition=competition)
    if type_errors:
        return type_errors
    errors = []
    if not (opponent or "").strip():
        errors.append("Please enter opponent name")
    elif len(opponent.strip()) > MAX_NAME_LENGTH:
        errors.append(f"Opponent name must be at most {MAX_NAME_LENGTH} characters")
    if game_date is None:
        errors.append("Please enter a game date")
    elif not isinstance(game_date, date):
        errors.append("Game date must be a date")
    if game_time is not None and not isinstance(game_time, time):
        errors.append("Game time must be a time of day")
    if location not in TEAM_SIDES:
        errors.append(f"Location must be one of {', '.join(TEAM_SIDES)}")
    return errors


def ensure_valid_player(first_name: str, last_name: str, number: Optional[str] = None) -> None:
    errors = validate_player_details(first_name, last_name, number)
    if errors:
        raise PlayerValidationError(errors)


def ensure_valid_game(
    opponent: str,
    game_date: Optional[date],
    location: str,
    game_time: Optional[time] = None,
    season: Optional[str] = None,
    competition: Optional[str] = None,
) -> None:
    errors = validate_game_details(opponent, game_date, location, game_time, season, competition)
    if errors:
        raise GameValidationError(errors)


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim text and turn blanks into None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(text_field_errors(value=value))
    stripped = value.strip()
    return stripped or None
