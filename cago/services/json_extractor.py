"""
Response extraction for model output.

Turns raw completion text into structured data:
  1. Strip a markdown code fence (```json ... ``` or ``` ... ```)
  2. Strict JSON parse
  3. Optionally, one truncation-repair pass for responses cut off at the
     provider's output-length limit

The text is only ever handed to json.loads, never evaluated.
"""
import json
from typing import Any, List, Optional

from cago.utils.errors import GenerationParseError
from cago.utils.logger import get_logger
from cago.utils.metrics import inc

logger = get_logger()

FENCE = "```"

# Only cut back to the last `",` when it sits in the final 20% of the text
TRUNCATION_CUT_RATIO = 0.8

_CLOSERS = {"{": "}", "[": "]"}


def strip_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if present."""
    cleaned = text.strip()

    if cleaned.startswith(FENCE):
        # Drops the opening fence and any language tag in one step
        first_newline = cleaned.find("\n")
        if first_newline != -1:
            cleaned = cleaned[first_newline + 1:]
        if cleaned.endswith(FENCE):
            cleaned = cleaned[:-len(FENCE)]

    return cleaned.strip()


def _open_containers(text: str) -> List[str]:
    """Containers left open at the end of text, outermost first.

    Braces and brackets inside string literals are ignored.
    """
    stack: List[str] = []
    in_string = False
    escaped = False

    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(ch)
        elif ch in ("}", "]") and stack:
            stack.pop()

    return stack


def repair_truncated(text: str) -> Optional[str]:
    """
    Close JSON structures left open by output truncation.

    Returns the repaired text, or None when the brace/bracket counts do not
    indicate truncation (in which case no repair applies).
    """
    repaired = strip_fences(text)

    open_braces = repaired.count("{")
    close_braces = repaired.count("}")
    open_brackets = repaired.count("[")
    close_brackets = repaired.count("]")

    if open_braces <= close_braces and open_brackets <= close_brackets:
        return None

    # Drop an incomplete trailing property/element, keeping the last
    # complete string value (closing quote kept, comma dropped)
    last_complete = repaired.rfind('",')
    if last_complete > len(repaired) * TRUNCATION_CUT_RATIO:
        repaired = repaired[:last_complete + 1]

    # Innermost container closes first
    closers = "".join(_CLOSERS[ch] for ch in reversed(_open_containers(repaired)))
    return repaired + closers


def extract(text: str, repair: bool = True) -> Any:
    """
    Parse model output into structured data.

    Args:
        text: raw completion text
        repair: allow one truncation-repair attempt on parse failure

    Raises:
        GenerationParseError: the text is not JSON, even after repair
    """
    if text is None:
        raise GenerationParseError("Empty model response", raw_text="")

    cleaned = strip_fences(text)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as parse_error:
        if not repair:
            inc("extract.parse_error")
            raise GenerationParseError(
                f"Model response is not valid JSON: {parse_error}", raw_text=text
            ) from parse_error
        first_error = parse_error

    logger.warning(f"JSON parse error, attempting repair (length={len(text)})")
    repaired = repair_truncated(text)
    if repaired is None:
        inc("extract.parse_error")
        raise GenerationParseError(
            f"Model response is not valid JSON: {first_error}", raw_text=text
        ) from first_error

    try:
        result = json.loads(repaired)
    except json.JSONDecodeError as repair_error:
        inc("extract.repair_failed")
        raise GenerationParseError(
            f"Model response could not be repaired: {repair_error}", raw_text=text
        ) from repair_error

    inc("extract.repaired")
    logger.info(f"Repaired truncated JSON ({len(text)} -> {len(repaired)} chars)")
    return result


def require_object(result: Any, raw_text: str = "") -> dict:
    """Reject parsed output that is not a JSON object."""
    if not isinstance(result, dict):
        raise GenerationParseError(
            f"Expected a JSON object, got {type(result).__name__}", raw_text=raw_text
        )
    return result
