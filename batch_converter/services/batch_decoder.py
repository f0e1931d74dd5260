"""
Reads a batch descriptor document back into a `BatchDescriptor`.

The document is advisory state: it lets the user pick up where the last run
left off. Losing it is harmless, refusing to start is not. `decode` therefore
never raises for a bad document. Any structural problem is reported once
through the notifier and an empty batch is returned in its place.

Decoding happens in two steps. The stream is fed to an lxml pull parser and
its start/end events are flattened into a list of tokens. A small recursive
descent parser then walks that list following the element grammar:

    BatchConversion
      Output
      FbxFile*
        Filename
        CollisionGeneration
        AnimClip*
          Name
          Keyframes  (Begin, End, FPS)

`CollisionGeneration` and `Keyframes` may be preceded by unknown sibling
elements, which are skipped. Every other position must match exactly.
"""
import re
from typing import Dict, Iterator, List, NamedTuple, Tuple, Union

from lxml import etree
from loguru import logger

from .notification_service import NotifyCallable, Severity, safe_notify
from ..config.common import (
    ATTRIBUTE_BEGIN,
    ATTRIBUTE_END,
    ATTRIBUTE_FPS,
    ELEMENT_CLIP,
    ELEMENT_CLIP_NAME,
    ELEMENT_COLLISION,
    ELEMENT_FILE,
    ELEMENT_FILENAME,
    ELEMENT_KEYFRAMES,
    ELEMENT_OUTPUT,
    ELEMENT_ROOT,
    READ_CHUNK_SIZE,
)
from ..domain.descriptor import BatchDescriptor, ClipDescriptor, FileEntry
from ..domain.exceptions import SourceFailure, StructuralDecodeException
from ..utils.format_utils import parse_number

_START = "start"
_END = "end"

# The encoding pseudo-attribute of an XML declaration at the start of a document.
_DECLARED_ENCODING = re.compile(r"""^(<\?xml\b[^?>]*?)\s+encoding\s*=\s*(["'])[^"']*\2""")


class _Token(NamedTuple):
    """An element boundary. End tokens carry the element's text content."""

    kind: str
    name: str
    attrib: Dict[str, str]
    text: str


def _drain_events(parser: etree.XMLPullParser) -> Iterator[_Token]:
    for event, element in parser.read_events():
        name = etree.QName(element).localname
        if event == _START:
            yield _Token(_START, name, dict(element.attrib), "")
        else:
            yield _Token(_END, name, {}, element.text or "")


def _new_parser() -> etree.XMLPullParser:
    # Comments and processing instructions are dropped so that text around
    # them is merged into a single value.
    return etree.XMLPullParser(
        events=(_START, _END),
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _read_chunk(stream) -> Union[bytes, str]:
    try:
        return stream.read(READ_CHUNK_SIZE)
    except UnicodeDecodeError as e:
        raise StructuralDecodeException(f"The document is not valid text: {e}") from e
    except (OSError, ValueError) as e:
        raise SourceFailure(f"Unable to read the batch descriptor: {e}") from e


def _text_to_bytes(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise StructuralDecodeException(f"The document is not valid text: {e}") from e


def _read_tokens(stream) -> List[_Token]:
    """
    Parses the whole stream into a flat token list.

    Text streams are already decoded. Their chunks are fed as UTF-8, and the
    byte order mark and the encoding named in the XML declaration are dropped
    from the first chunk. Binary streams are decoded by lxml according to the
    declaration.

    Raises:
        SourceFailure: If the stream itself cannot be read.
        StructuralDecodeException: If a text stream holds undecodable bytes
                                   or characters that are not valid text.
        etree.XMLSyntaxError: If the document is not well-formed.
    """
    parser = _new_parser()
    tokens: List[_Token] = []
    first_chunk = True
    while True:
        chunk = _read_chunk(stream)
        if not chunk:
            break
        if isinstance(chunk, str):
            if first_chunk:
                chunk = _DECLARED_ENCODING.sub(r"\1", chunk.lstrip("\ufeff"), count=1)
            chunk = _text_to_bytes(chunk)
        first_chunk = False
        parser.feed(chunk)
        tokens.extend(_drain_events(parser))

    parser.close()
    tokens.extend(_drain_events(parser))
    return tokens


class _TokenCursor:
    """Forward-only position in the token list with the grammar primitives."""

    def __init__(self, tokens: List[_Token]):
        self._tokens = tokens
        self._position = 0

    def peek(self) -> _Token:
        if self._position >= len(self._tokens):
            raise StructuralDecodeException("The document ended before the batch was complete.")
        return self._tokens[self._position]

    def advance(self) -> _Token:
        token = self.peek()
        self._position += 1
        return token

    def at_start(self, name: str) -> bool:
        token = self.peek()
        return token.kind == _START and token.name == name

    def expect_start(self, name: str) -> _Token:
        token = self.advance()
        if token.kind != _START or token.name != name:
            raise StructuralDecodeException(f"Expected <{name}>, found {_describe(token)}.")
        return token

    def expect_end(self, name: str) -> None:
        token = self.advance()
        if token.kind != _END or token.name != name:
            raise StructuralDecodeException(f"Expected </{name}>, found {_describe(token)}.")

    def skip_element(self) -> None:
        """Consumes the element starting at the cursor, children included."""
        self.advance()
        depth = 1
        while depth:
            depth += 1 if self.advance().kind == _START else -1

    def seek_following(self, name: str) -> None:
        """Moves to the next start of `name` at any depth."""
        while self._position < len(self._tokens):
            if self.at_start(name):
                return
            self._position += 1
        raise StructuralDecodeException(f"No <{name}> element found.")

    def seek_child(self, name: str, parent: str) -> None:
        """Moves to the next child named `name`, skipping other children."""
        while not self.at_start(name):
            token = self.peek()
            if token.kind == _END:
                raise StructuralDecodeException(f"Missing <{name}> inside <{parent}>.")
            logger.debug(f"Skipping <{token.name}> inside <{parent}>.")
            self.skip_element()

    def read_text(self, name: str) -> str:
        """Reads an element that must contain nothing but text."""
        self.expect_start(name)
        token = self.advance()
        if token.kind != _END:
            raise StructuralDecodeException(f"<{name}> must contain only text.")
        return token.text


def _describe(token: _Token) -> str:
    if token.kind == _START:
        return f"<{token.name}>"
    return f"</{token.name}>"


def _number_attribute(token: _Token, attribute: str) -> float:
    value = token.attrib.get(attribute)
    if value is None:
        raise StructuralDecodeException(f"<{token.name}> is missing the '{attribute}' attribute.")
    try:
        return parse_number(value)
    except ValueError as e:
        raise StructuralDecodeException(
            f"Attribute '{attribute}' of <{token.name}> is not a number: '{value}'."
        ) from e


class _BatchParser:
    """Recursive descent over the tokens of one batch document."""

    def __init__(self, cursor: _TokenCursor):
        self.cursor = cursor

    def parse(self) -> BatchDescriptor:
        cursor = self.cursor
        cursor.seek_following(ELEMENT_ROOT)
        cursor.expect_start(ELEMENT_ROOT)

        batch = BatchDescriptor()
        cursor.seek_child(ELEMENT_OUTPUT, ELEMENT_ROOT)
        batch.output_dir = cursor.read_text(ELEMENT_OUTPUT)

        while cursor.at_start(ELEMENT_FILE):
            path, entry = self._parse_file()
            batch.add_file(path, entry)

        cursor.expect_end(ELEMENT_ROOT)
        return batch

    def _parse_file(self) -> Tuple[str, FileEntry]:
        cursor = self.cursor
        cursor.expect_start(ELEMENT_FILE)

        cursor.seek_child(ELEMENT_FILENAME, ELEMENT_FILE)
        path = cursor.read_text(ELEMENT_FILENAME)

        cursor.seek_child(ELEMENT_COLLISION, ELEMENT_FILE)
        entry = FileEntry(collision_type=cursor.read_text(ELEMENT_COLLISION))

        while cursor.at_start(ELEMENT_CLIP):
            name, clip = self._parse_clip()
            entry.add_clip(name, clip)

        cursor.expect_end(ELEMENT_FILE)
        return path, entry

    def _parse_clip(self) -> Tuple[str, ClipDescriptor]:
        cursor = self.cursor
        cursor.expect_start(ELEMENT_CLIP)

        cursor.seek_child(ELEMENT_CLIP_NAME, ELEMENT_CLIP)
        name = cursor.read_text(ELEMENT_CLIP_NAME)

        cursor.seek_child(ELEMENT_KEYFRAMES, ELEMENT_CLIP)
        keyframes = cursor.peek()
        clip = ClipDescriptor(
            begin_frame=_number_attribute(keyframes, ATTRIBUTE_BEGIN),
            end_frame=_number_attribute(keyframes, ATTRIBUTE_END),
            fps=_number_attribute(keyframes, ATTRIBUTE_FPS),
        )
        cursor.skip_element()

        cursor.expect_end(ELEMENT_CLIP)
        return name, clip


def decode(stream, notify: NotifyCallable) -> BatchDescriptor:
    """
    Reads a batch descriptor from a stream.

    Any structural problem (malformed XML, a missing or misplaced element, a
    truncated document, a duplicate file path or clip name, a missing or
    non-numeric keyframe attribute) discards everything read so far. It is
    reported through `notify` with `Severity.ERROR` and an empty batch is
    returned.

    Args:
        stream: A readable binary or text stream. It is read but not closed.
        notify: The notifier receiving the error, if any.

    Returns:
        The decoded batch, or an empty `BatchDescriptor` on a structural problem.

    Raises:
        SourceFailure: If the stream itself cannot be read.
    """
    try:
        tokens = _read_tokens(stream)
        batch = _BatchParser(_TokenCursor(tokens)).parse()
    except (StructuralDecodeException, etree.LxmlError) as e:
        logger.debug(f"Batch descriptor rejected: {e}")
        safe_notify(
            notify,
            f"Unable to read the batch descriptor, starting with a clean slate: {e}",
            Severity.ERROR,
        )
        return BatchDescriptor()

    clip_count = sum(len(entry.clips) for entry in batch.files.values())
    logger.debug(f"Decoded batch with {len(batch.files)} file(s) and {clip_count} clip(s).")
    return batch
