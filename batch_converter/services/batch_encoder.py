"""
Writes a `BatchDescriptor` as a batch descriptor document.

The document is what the backend process reads, so every file entry it
contains must point at an input that exists. Entries whose file is missing are
left out and reported through the notifier; the rest of the batch is still
written. Only a sink that cannot be written aborts the call.

The layout mirrors the grammar accepted by `batch_decoder`, so whatever is
written here decodes back to the same batch:

    <?xml version="1.0" encoding="utf-8"?>
    <BatchConversion>
        <Output>C:/out/</Output>
        <FbxFile>
            <Filename>model.fbx</Filename>
            <CollisionGeneration>Convex</CollisionGeneration>
            <AnimClip>
                <Name>Walk</Name>
                <Keyframes Begin="0" End="30" FPS="24"/>
            </AnimClip>
        </FbxFile>
    </BatchConversion>
"""
import io
from typing import Callable

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
    XML_DECLARATION,
    XML_INDENT,
)
from ..domain.descriptor import BatchDescriptor, FileEntry
from ..domain.exceptions import DescriptorEncodeException, SinkFailure
from ..utils.format_utils import format_number

ExistsCallable = Callable[[str], bool]


def _text_element(parent: etree._Element, name: str, text: str) -> etree._Element:
    element = etree.SubElement(parent, name)
    element.text = text
    return element


def _file_element(path: str, entry: FileEntry) -> etree._Element:
    """
    Builds the <FbxFile> element of one entry.

    Raises:
        ValueError: If a path, tag or clip name contains characters that
                    cannot appear in XML.
    """
    file_element = etree.Element(ELEMENT_FILE)
    _text_element(file_element, ELEMENT_FILENAME, path)
    _text_element(file_element, ELEMENT_COLLISION, entry.collision_type)

    for name, clip in entry.clips.items():
        clip_element = etree.SubElement(file_element, ELEMENT_CLIP)
        _text_element(clip_element, ELEMENT_CLIP_NAME, name)
        keyframes = etree.SubElement(clip_element, ELEMENT_KEYFRAMES)
        # Attribute order is part of the canonical output.
        keyframes.set(ATTRIBUTE_BEGIN, format_number(clip.begin_frame))
        keyframes.set(ATTRIBUTE_END, format_number(clip.end_frame))
        keyframes.set(ATTRIBUTE_FPS, format_number(clip.fps))
    return file_element


def build_document(batch: BatchDescriptor, exists: ExistsCallable, notify: NotifyCallable) -> str:
    """
    Builds the complete document text for a batch.

    Args:
        batch: The batch to write. It is not modified.
        exists: Answers whether an input file currently exists.
        notify: Receives one warning per skipped file.

    Returns:
        The document, starting with the XML declaration.

    Raises:
        DescriptorEncodeException: If the output directory cannot be written as XML.
    """
    root = etree.Element(ELEMENT_ROOT)
    try:
        _text_element(root, ELEMENT_OUTPUT, batch.output_dir)
    except ValueError as e:
        raise DescriptorEncodeException(f"The output directory cannot be written: {e}") from e

    written = 0
    for path, entry in batch.files.items():
        if not exists(path):
            logger.debug(f"Skipping missing file: {path}")
            safe_notify(
                notify,
                f"Unable to find file {path}.\nThis file will be skipped.",
                Severity.WARNING,
            )
            continue

        try:
            file_element = _file_element(path, entry)
        except ValueError as e:
            safe_notify(
                notify,
                f"Unable to write the entry for file {path!r}: {e}.\nThis file will be skipped.",
                Severity.ERROR,
            )
            continue

        root.append(file_element)
        written += 1

    logger.debug(f"Encoded {written} of {len(batch.files)} file(s).")
    etree.indent(root, space=XML_INDENT)
    body = etree.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n"


def encode(batch: BatchDescriptor, sink, exists: ExistsCallable, notify: NotifyCallable) -> None:
    """
    Writes a batch to a stream.

    The document is built in memory first and handed to the sink in a single
    write, so a problem with the content never leaves half a document behind.
    Files for which `exists` is False are skipped with a warning notification.

    Args:
        batch: The batch to write. It is not modified.
        sink: A writable text or binary stream. It is written to but not closed.
        exists: Answers whether an input file currently exists.
        notify: Receives the notifications for skipped files.

    Raises:
        SinkFailure: If the sink cannot be written.
        DescriptorEncodeException: If the output directory cannot be written as XML.
    """
    document = build_document(batch, exists, notify)
    data = document if isinstance(sink, io.TextIOBase) else document.encode("utf-8")
    try:
        sink.write(data)
        sink.flush()
    except (OSError, ValueError) as e:
        raise SinkFailure(f"Unable to write the batch descriptor: {e}") from e
