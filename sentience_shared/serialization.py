"""Serialization utilities for timestamps and configuration JSON.

Centralizes common serialization patterns used across the codebase:
- UTC timestamps
- JSON decoding of configuration bundles
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


def from_json(json_str: Optional[Union[str, bytes, Dict, list]]) -> Any:
    """Convert JSON string to Python object.

    Already-parsed dicts and lists are returned as-is.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
    """
    if json_str is None:
        return None

    if isinstance(json_str, (dict, list)):
        return json_str

    return json.loads(json_str)


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
