"""
In-memory model of a batch conversion.

A batch is a shared output directory plus an ordered set of FBX files, each
carrying the collision mesh to generate and an ordered set of named animation
clips. The model is plain data: it is filled by the decoder or by the editor,
read by the encoder, and never validates clip values itself.

Both maps are regular dicts, so keys are unique and iteration follows the
order in which entries were added. That order is what the encoder writes.
"""
from dataclasses import dataclass, field
from typing import Dict

from .exceptions import DuplicateKeyException
from ..config.common import (
    COLLISION_CONCAVE,
    COLLISION_CONVEX,
    COLLISION_NONE,
    COLLISION_UNSET,
)


@dataclass
class ClipDescriptor:
    """A named sub-range of an animation timeline."""

    begin_frame: float = 0.0
    end_frame: float = 0.0
    fps: float = 0.0


@dataclass
class FileEntry:
    """
    One conversion job.

    Attributes:
        collision_type: The collision generation tag, stored verbatim. The
                        known values are "None", "Convex" and "Concave"; an
                        empty string means it was never chosen.
        clips: Clip descriptors keyed by clip name, in insertion order.
    """

    collision_type: str = COLLISION_UNSET
    clips: Dict[str, ClipDescriptor] = field(default_factory=dict)

    def add_clip(self, name: str, clip: ClipDescriptor) -> ClipDescriptor:
        """
        Adds a clip under a name that is not used yet in this file.

        Raises:
            DuplicateKeyException: If a clip with this name already exists.
        """
        if name in self.clips:
            raise DuplicateKeyException(f"An animation clip named '{name}' already exists.")
        self.clips[name] = clip
        return clip

    def remove_clip(self, name: str) -> None:
        self.clips.pop(name, None)

    @property
    def collision_generation(self) -> str:
        """The collision mesh the backend will actually generate for this tag."""
        if self.collision_type in (COLLISION_CONCAVE, COLLISION_CONVEX):
            return self.collision_type
        return COLLISION_NONE


@dataclass
class BatchDescriptor:
    """
    The root aggregate of a batch conversion.

    Attributes:
        output_dir: Directory the backend writes converted files to.
        files: File entries keyed by input path, in insertion order.
    """

    output_dir: str = ""
    files: Dict[str, FileEntry] = field(default_factory=dict)

    def add_file(self, path: str, entry: FileEntry) -> FileEntry:
        """
        Adds a file under a path that is not part of the batch yet.

        Raises:
            DuplicateKeyException: If the path is already in the batch.
        """
        if path in self.files:
            raise DuplicateKeyException(f"The file '{path}' is already part of the batch.")
        self.files[path] = entry
        return entry

    def remove_file(self, path: str) -> None:
        self.files.pop(path, None)

    def is_empty(self) -> bool:
        return not self.output_dir and not self.files

    def clear(self) -> None:
        self.output_dir = ""
        self.files.clear()
