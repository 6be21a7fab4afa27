"""
Segment tokenizer.

Splits raw X12 text into segments and segments into elements. Element
positions are significant, so empty elements are always kept.
"""
from typing import List, Optional, Union

from .exceptions import MalformedSegmentError
from .logger import get_logger
from .models import X12Options

DEFAULT_OPTIONS = X12Options()


def parse_segments(text: Union[str, bytes], options: Optional[X12Options] = None) -> List[List[str]]:
    """
    Tokenize X12 text.

    Args:
        text: Raw transaction set text (envelope already stripped)
        options: Delimiters; defaults to ~ * :

    Returns:
        Ordered list of segments, each an ordered list of elements where
        element 0 is the segment tag.
        [['BEG', '00', 'NE', 'PO123', '', '20231015'], ['N1', 'ST', ...]]

    Raises:
        MalformedSegmentError: no segments at all, a segment without a tag,
            or bytes that are not valid UTF-8
    """
    options = options or DEFAULT_OPTIONS
    logger = get_logger()

    text = decode_text(text)

    terminator = options.segment_terminator
    if terminator not in text and "\n" in text:
        # One segment per line, no terminator character
        logger.debug(f"Terminator '{terminator}' not found, splitting on line breaks")
        terminator = "\n"

    segments = []
    for raw_segment in text.split(terminator):
        # Only the CR/LF padding around a segment is dropped, never spaces inside element data
        raw_segment = raw_segment.strip("\r\n")
        if not raw_segment.strip():
            continue

        elements = raw_segment.split(options.element_separator)
        if not elements[0].strip():
            raise MalformedSegmentError(
                f"Segment has no tag: '{raw_segment[:40]}'",
                segment_position=len(segments),
            )
        elements[0] = elements[0].strip()
        segments.append(elements)

    if not segments:
        raise MalformedSegmentError("No segments found in input")

    logger.debug(f"Tokenized {len(segments)} segments")
    return segments


def decode_text(text: Union[str, bytes]) -> str:
    """
    Return input as str without a leading byte order mark.

    Raises:
        MalformedSegmentError: bytes are not valid UTF-8
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedSegmentError(
                f"Input is not valid UTF-8: byte 0x{e.object[e.start]:02x} at offset {e.start}"
            ) from e
    return text[1:] if text.startswith("\ufeff") else text


def element(segment: List[str], index: int) -> str:
    """Element at a position, or '' when the segment is shorter (trailing elements omitted)."""
    if index < len(segment):
        return segment[index]
    return ""


def split_composite(value: str, options: Optional[X12Options] = None) -> List[str]:
    """Split a composite element into its components."""
    options = options or DEFAULT_OPTIONS
    return value.split(options.composite_separator)
