import pytest

from batch_converter.domain.descriptor import BatchDescriptor, ClipDescriptor, FileEntry
from batch_converter.domain.exceptions import DuplicateKeyException, StructuralDecodeException


def test_new_batch_is_empty() -> None:
    batch = BatchDescriptor()
    assert batch.output_dir == ""
    assert batch.files == {}
    assert batch.is_empty()


def test_file_entry_defaults_to_unset_collision() -> None:
    entry = FileEntry()
    assert entry.collision_type == ""
    assert entry.clips == {}


def test_files_keep_insertion_order() -> None:
    batch = BatchDescriptor()
    for path in ("c.fbx", "a.fbx", "b.fbx"):
        batch.add_file(path, FileEntry())
    assert list(batch.files) == ["c.fbx", "a.fbx", "b.fbx"]


def test_add_file_rejects_duplicate_path() -> None:
    batch = BatchDescriptor()
    batch.add_file("model.fbx", FileEntry(collision_type="None"))
    with pytest.raises(DuplicateKeyException):
        batch.add_file("model.fbx", FileEntry(collision_type="Convex"))
    assert batch.files["model.fbx"].collision_type == "None"


def test_add_clip_rejects_duplicate_name() -> None:
    entry = FileEntry()
    entry.add_clip("Walk", ClipDescriptor(0, 30, 24))
    with pytest.raises(DuplicateKeyException):
        entry.add_clip("Walk", ClipDescriptor(5, 10, 30))
    assert entry.clips["Walk"] == ClipDescriptor(0, 30, 24)


def test_duplicate_key_is_a_structural_error() -> None:
    assert issubclass(DuplicateKeyException, StructuralDecodeException)


def test_remove_missing_keys_is_a_no_op() -> None:
    batch = BatchDescriptor()
    entry = batch.add_file("model.fbx", FileEntry())
    batch.remove_file("other.fbx")
    entry.remove_clip("Run")
    assert list(batch.files) == ["model.fbx"]


def test_clear_resets_batch(walk_batch: BatchDescriptor) -> None:
    walk_batch.clear()
    assert walk_batch.is_empty()


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("Concave", "Concave"),
        ("Convex", "Convex"),
        ("None", "None"),
        ("", "None"),
        ("Bogus", "None"),
    ],
)
def test_collision_generation_follows_backend_interpretation(tag: str, expected: str) -> None:
    assert FileEntry(collision_type=tag).collision_generation == expected
