"""
Helper Functions

Contains utility functions used throughout the application.
"""

import re
from typing import Optional

from flask import request

ENTER = "ENTER"
BACKSPACE = "BACKSPACE"

PLAYER_ID_HEADER = "X-Player-Id"
_PLAYER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.:-]{1,128}$")


def get_player_id(request_obj=None) -> str:
    """
    Identify the player behind a request.

    Browsers send a stable random id in the X-Player-Id header; requests
    without a usable one fall back to the client address.
    """
    if request_obj is None:
        request_obj = request

    player_id = (request_obj.headers.get(PLAYER_ID_HEADER) or "").strip()
    if player_id and _PLAYER_ID_PATTERN.match(player_id):
        return player_id
    return f"ip:{request_obj.remote_addr or 'unknown'}"


def normalize_key(raw_key) -> Optional[str]:
    """
    Normalise a keyboard event to ENTER, BACKSPACE or a single A-Z letter.

    Anything else (modifiers, digits, accented letters) yields None.
    """
    if not isinstance(raw_key, str):
        return None
    key = raw_key.strip().upper()
    if key in (ENTER, BACKSPACE):
        return key
    if len(key) == 1 and "A" <= key <= "Z":
        return key
    return None
