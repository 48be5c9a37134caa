"""Best-effort JSON array extraction from free-form model output."""

from __future__ import annotations

import json

_DECODER = json.JSONDecoder()


def extract_json_array(text: str) -> list | None:
    """Return the JSON array literal embedded in ``text``.

    Every ``[`` is tried as the start of an array and decoded on its own, so
    a match ends at that array's closing bracket rather than at the last
    ``]`` in the text. The first array holding an object wins; failing that,
    the first array of any kind (``[]`` from a model with nothing to offer).
    Returns ``None`` when nothing decodes.
    """
    first_array: list | None = None
    start = text.find("[")
    while start != -1:
        try:
            value, end = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("[", start + 1)
            continue
        if isinstance(value, list):
            if any(isinstance(item, dict) for item in value):
                return value
            if first_array is None:
                first_array = value
        start = text.find("[", start + 1)
    return first_array
