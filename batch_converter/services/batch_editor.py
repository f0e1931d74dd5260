"""
Validated editing of a batch.

The descriptor codec stores whatever it is given. Checking that a clip ends
after it begins, that a frame rate is not negative, or that a collision type
was actually chosen is the job of whoever produces the data. `BatchEditor` is
that producer for the command line host: every edit goes through it, and a
rejected edit leaves the batch untouched.
"""
from typing import Optional, Union

from loguru import logger

from ..config.common import COLLISION_TYPES
from ..domain.descriptor import BatchDescriptor, ClipDescriptor, FileEntry
from ..domain.exceptions import (
    EmptyBatchException,
    InvalidClipException,
    InvalidCollisionTypeException,
    MissingOutputDirException,
    UnknownFileException,
)
from ..utils.format_utils import parse_number
from ..utils.path_utils import with_trailing_separator

Number = Union[str, float, int]


def _to_number(value: Number, field_name: str) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return parse_number(value)
    except ValueError as e:
        raise InvalidClipException(f"{field_name} must be a valid number, got '{value}'.") from e


def _check_clip(clip: ClipDescriptor) -> None:
    if clip.begin_frame > clip.end_frame:
        raise InvalidClipException(
            f"Begin ({clip.begin_frame}) must not be greater than End ({clip.end_frame})."
        )
    if clip.fps < 0:
        raise InvalidClipException(f"FPS must not be negative, got {clip.fps}.")


def _check_collision_type(collision_type: str) -> None:
    if collision_type not in COLLISION_TYPES:
        raise InvalidCollisionTypeException(
            f"Please select the collision to generate, one of: {', '.join(COLLISION_TYPES)}."
        )


class BatchEditor:
    """
    Applies user edits to a `BatchDescriptor`.

    Attributes:
        batch (BatchDescriptor): The batch being edited, modified in place.
    """

    def __init__(self, batch: Optional[BatchDescriptor] = None):
        self.batch = batch if batch is not None else BatchDescriptor()

    def set_output_dir(self, output_dir: str) -> str:
        self.batch.output_dir = with_trailing_separator(output_dir.strip())
        logger.debug(f"Output directory set to: {self.batch.output_dir}")
        return self.batch.output_dir

    def add_file(self, path: str, collision_type: str) -> FileEntry:
        """
        Adds an input file to the batch.

        Raises:
            InvalidCollisionTypeException: If no known collision type is given.
            DuplicateKeyException: If the file is already part of the batch.
        """
        _check_collision_type(collision_type)
        entry = self.batch.add_file(path, FileEntry(collision_type=collision_type))
        logger.debug(f"Added file {path} with collision {collision_type}.")
        return entry

    def set_collision_type(self, path: str, collision_type: str) -> None:
        _check_collision_type(collision_type)
        self._get_file(path).collision_type = collision_type

    def remove_file(self, path: str) -> None:
        self.batch.remove_file(path)

    def add_clip(self, path: str, name: str, begin: Number, end: Number, fps: Number) -> ClipDescriptor:
        """
        Adds an animation clip to a file of the batch.

        Numbers given as text are parsed with a period as decimal separator.

        Raises:
            UnknownFileException: If the file is not part of the batch.
            InvalidClipException: If the values are not numbers, if Begin is
                                  greater than End, or if FPS is negative.
            DuplicateKeyException: If the file already has a clip with this name.
        """
        entry = self._get_file(path)
        if not name:
            raise InvalidClipException("An animation clip needs a name.")
        clip = ClipDescriptor(
            begin_frame=_to_number(begin, "Begin"),
            end_frame=_to_number(end, "End"),
            fps=_to_number(fps, "FPS"),
        )
        _check_clip(clip)
        return entry.add_clip(name, clip)

    def update_clip(
        self,
        path: str,
        name: str,
        begin: Optional[Number] = None,
        end: Optional[Number] = None,
        fps: Optional[Number] = None,
    ) -> ClipDescriptor:
        """
        Changes some values of an existing clip.

        The change is checked as a whole and discarded if the resulting clip
        would be invalid.

        Raises:
            UnknownFileException: If the file or the clip does not exist.
            InvalidClipException: If the resulting clip would be invalid.
        """
        entry = self._get_file(path)
        current = entry.clips.get(name)
        if current is None:
            raise UnknownFileException(f"The file '{path}' has no animation clip named '{name}'.")

        updated = ClipDescriptor(
            begin_frame=current.begin_frame if begin is None else _to_number(begin, "Begin"),
            end_frame=current.end_frame if end is None else _to_number(end, "End"),
            fps=current.fps if fps is None else _to_number(fps, "FPS"),
        )
        _check_clip(updated)
        entry.clips[name] = updated
        return updated

    def remove_clip(self, path: str, name: str) -> None:
        self._get_file(path).remove_clip(name)

    def check_ready(self) -> None:
        """
        Verifies that the batch can be handed to the backend.

        Raises:
            EmptyBatchException: If no files have been added.
            MissingOutputDirException: If no output directory has been set.
        """
        if not self.batch.files:
            raise EmptyBatchException("Add .fbx files to the batch first.")
        if not self.batch.output_dir:
            raise MissingOutputDirException("Please provide an output directory.")

    def _get_file(self, path: str) -> FileEntry:
        entry = self.batch.files.get(path)
        if entry is None:
            raise UnknownFileException(f"The file '{path}' is not part of the batch.")
        return entry
