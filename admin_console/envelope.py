"""
Response Envelope Normalisation

The backend is not uniform about where it puts a payload: a list may come back
bare, under `data`, under `data.<resource>` or `data.<resource>s`. All of the
defensive unwrapping lives here so callers only ever see a list or a record.
"""

from typing import Any, Callable, Dict, List, Optional


ListMatcher = Callable[[Any, str], Optional[List[Any]]]


def _bare_list(raw: Any, key: str) -> Optional[List[Any]]:
    return raw if isinstance(raw, list) else None


def _data_list(raw: Any, key: str) -> Optional[List[Any]]:
    if isinstance(raw, dict) and isinstance(raw.get("data"), list):
        return raw["data"]
    return None


def _data_keyed_list(raw: Any, key: str) -> Optional[List[Any]]:
    if not isinstance(raw, dict) or not isinstance(raw.get("data"), dict):
        return None
    data = raw["data"]
    for candidate in (key, f"{key}s"):
        if isinstance(data.get(candidate), list):
            return data[candidate]
    return None


def _top_keyed_list(raw: Any, key: str) -> Optional[List[Any]]:
    if not isinstance(raw, dict):
        return None
    for candidate in (key, f"{key}s"):
        if isinstance(raw.get(candidate), list):
            return raw[candidate]
    return None


# Tried in order; first match wins
LIST_MATCHERS: List[ListMatcher] = [
    _bare_list,
    _data_list,
    _data_keyed_list,
    _top_keyed_list,
]


def unwrap_list(raw: Any, key: str = "") -> List[Any]:
    """
    Extract the item list from a list-endpoint response.

    Args:
        raw: Decoded JSON body
        key: Resource key, singular or plural (e.g. "bank" or "banks")

    Returns:
        The items, or an empty list when no known shape matches
    """
    for matcher in LIST_MATCHERS:
        items = matcher(raw, key)
        if items is not None:
            return items
    return []


def unwrap_record(raw: Any, key: str = "") -> Optional[Dict[str, Any]]:
    """Extract a single record from `data.<key>`, `data`, or a bare object"""
    if not isinstance(raw, dict):
        return None

    data = raw.get("data")
    if isinstance(data, dict):
        if key and isinstance(data.get(key), dict):
            return data[key]
        return data

    # A bare record: anything that is not just an envelope around nothing
    envelope_keys = {"status", "message", "data", "error"}
    if raw and not set(raw).issubset(envelope_keys):
        return raw
    return None


def extract_message(raw: Any, default: str = "") -> str:
    """Pull a human-readable message out of an error/success body"""
    if isinstance(raw, dict):
        for field in ("message", "detail", "error"):
            value = raw.get(field)
            if isinstance(value, str) and value:
                return value
    if isinstance(raw, str) and raw:
        return raw
    return default
