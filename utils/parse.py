"""Failure record decoder.

Every line of a failures file is supposed to be one JSON object, but real
files are produced by hand-edited scripts and CI log scrapers. The decoder
handles the one common failure mode that can be repaired safely:

- A bare key/value list with the object braces missing, often with a
  trailing comma:   "test_id": "T1", "module": "checkout",

Anything else is reported as a RecordDecodeError carrying the raw line so
the caller can log it and move on.
"""

import json
import re


class RecordDecodeError(ValueError):
    """Raised when a failure record line cannot be decoded into a mapping.

    Includes the 1-based line number and the raw line so callers can report
    exactly which input was skipped.
    """

    def __init__(self, message: str, raw: str, line_number: int | None = None):
        super().__init__(message)
        self.raw = raw
        self.line_number = line_number


def decode_record(line: str, line_number: int | None = None) -> dict:
    """Decode one failure record line into a mapping.

    Tries two strategies in order, stopping at the first that produces a
    JSON object:
        1. Parse the line as-is.
        2. If the line does not start with "{" but contains ":", strip
           trailing commas, wrap it in braces and parse once more.

    Args:
        line:        One raw line of input. Surrounding whitespace is ignored.
        line_number: 1-based position of the line, attached to the error.

    Returns:
        The decoded mapping.

    Raises:
        RecordDecodeError: If neither strategy yields a JSON object.
    """
    text = line.strip()

    data = _try_parse(text)
    if data is None and not text.startswith("{") and ":" in text:
        data = _try_parse("{" + _strip_trailing_commas(text) + "}")
    if data is None:
        raise RecordDecodeError(
            f"Line {line_number}: not a JSON object" if line_number else "Not a JSON object",
            raw=line,
            line_number=line_number,
        )
    return data


# ── Private helpers ────────────────────────────────────────────────────────────

def _strip_trailing_commas(text: str) -> str:
    return re.sub(r",+\s*$", "", text)


def _try_parse(text: str) -> dict | None:
    """Attempt a direct json.loads(); return None unless it yields an object."""
    try:
        result = json.loads(text)
    except (ValueError, RecursionError):
        # JSONDecodeError, the int digit limit and pathological nesting.
        return None
    return result if isinstance(result, dict) else None
