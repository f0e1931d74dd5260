"""
This module contains helper functions for converting values to and from text.

The most important pair is `format_number` / `parse_number`: clip bounds and
frame rates are stored as text attributes, and both directions must behave the
same on every machine. Python's `float()` and `repr()` never consult the
locale, so a period is always the decimal separator and the shortest text that
round-trips the value is written. The remaining helpers format a batch for
display on the console.
"""

import math
import re
from typing import List

from ..domain.descriptor import BatchDescriptor, ClipDescriptor

# Plain decimal numbers with an optional exponent. Thousands separators,
# underscores and hexadecimal notation are rejected.
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Non-finite values use the spelling found in existing batch files.
_NAN_TEXT = "NaN"
_POSITIVE_INFINITY_TEXT = "Infinity"
_NEGATIVE_INFINITY_TEXT = "-Infinity"
_SPECIAL_VALUES = {
    _NAN_TEXT: math.nan,
    _POSITIVE_INFINITY_TEXT: math.inf,
    "+" + _POSITIVE_INFINITY_TEXT: math.inf,
    _NEGATIVE_INFINITY_TEXT: -math.inf,
}


def format_number(value: float) -> str:
    """
    Formats a number with a period as decimal separator, independent of locale.

    Integral values are written without a fractional part (30.0 becomes "30"),
    everything else uses the shortest representation that parses back to the
    identical float (29.97 stays "29.97").

    Args:
        value: The number to format.

    Returns:
        The text representation accepted by `parse_number`.
    """
    value = float(value)
    if math.isnan(value):
        return _NAN_TEXT
    if math.isinf(value):
        return _POSITIVE_INFINITY_TEXT if value > 0 else _NEGATIVE_INFINITY_TEXT

    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def parse_number(text: str) -> float:
    """
    Parses a decimal number written with a period as separator.

    Leading and trailing whitespace is ignored. Besides plain decimals with an
    optional exponent, "NaN", "Infinity" and "-Infinity" are accepted.

    Args:
        text: The text to parse.

    Returns:
        The parsed value as a float.

    Raises:
        ValueError: If the text is not a number in the accepted notation.
    """
    if text is None:
        raise ValueError("No number given.")

    stripped = text.strip()
    if stripped in _SPECIAL_VALUES:
        return _SPECIAL_VALUES[stripped]
    if not _DECIMAL_PATTERN.fullmatch(stripped):
        raise ValueError(f"'{text}' is not a valid number.")
    return float(stripped)


def format_clip(name: str, clip: ClipDescriptor) -> str:
    """Formats a clip as a single line, e.g. "Walk: 0 -> 30 @ 24 fps"."""
    return (
        f"{name}: {format_number(clip.begin_frame)} -> "
        f"{format_number(clip.end_frame)} @ {format_number(clip.fps)} fps"
    )


def format_batch(batch: BatchDescriptor) -> List[str]:
    """
    Formats a batch as console lines, one per file followed by its clips.

    Returns:
        A list of lines. An empty batch still reports its output directory.
    """
    lines = [f"Output: {batch.output_dir or '<not set>'}"]
    if not batch.files:
        lines.append("No files in batch.")
        return lines

    for path, entry in batch.files.items():
        collision = entry.collision_type or "<not set>"
        lines.append(f"{path} (collision: {collision})")
        for name, clip in entry.clips.items():
            lines.append(f"    {format_clip(name, clip)}")
    return lines
