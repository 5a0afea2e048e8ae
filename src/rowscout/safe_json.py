"""Parse untrusted JSON text without raising."""

from __future__ import annotations

import json

from rowscout.models import SafeJsonParseResult


def safe_json_parse(text: str | bytes) -> SafeJsonParseResult:
    """Parse ``text``, keeping the decoder's message when it is not valid JSON."""
    try:
        return SafeJsonParseResult(ok=True, data=json.loads(text))
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as exc:
        message = str(exc) or "Unknown JSON parsing error"
        return SafeJsonParseResult(ok=False, data=None, error_message=message)
