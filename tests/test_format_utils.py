import math
from pathlib import Path

import pytest

from batch_converter.domain.descriptor import BatchDescriptor
from batch_converter.utils.format_utils import format_batch, format_number, parse_number
from batch_converter.utils.path_utils import file_exists, with_trailing_separator


@pytest.mark.parametrize(
    "value, text",
    [
        (30.0, "30"),
        (0.0, "0"),
        (0.5, "0.5"),
        (29.97, "29.97"),
        (-12.25, "-12.25"),
        (24, "24"),
    ],
)
def test_format_number(value: float, text: str) -> None:
    assert format_number(value) == text


def test_format_number_non_finite() -> None:
    assert format_number(math.nan) == "NaN"
    assert format_number(math.inf) == "Infinity"
    assert format_number(-math.inf) == "-Infinity"


@pytest.mark.parametrize("value", [0.1, 29.97, 1e-7, 123456789.125, 1e20, -0.333])
def test_formatted_numbers_parse_back_exactly(value: float) -> None:
    assert parse_number(format_number(value)) == value


@pytest.mark.parametrize(
    "text, value",
    [
        ("0", 0.0),
        ("30", 30.0),
        (" 29.97 ", 29.97),
        ("1.5e3", 1500.0),
        (".5", 0.5),
        ("-2.", -2.0),
        ("Infinity", math.inf),
        ("-Infinity", -math.inf),
    ],
)
def test_parse_number(text: str, value: float) -> None:
    assert parse_number(text) == value


def test_parse_number_nan() -> None:
    assert math.isnan(parse_number("NaN"))


@pytest.mark.parametrize("text", ["", "abc", "0,5", "1,000", "1_000", "0x10", "nan", "inf", "1.2.3", None])
def test_parse_number_rejects_invalid_text(text) -> None:
    with pytest.raises(ValueError):
        parse_number(text)


def test_format_batch_lists_files_and_clips(walk_batch: BatchDescriptor) -> None:
    lines = format_batch(walk_batch)
    assert lines == [
        "Output: C:/out/",
        "model.fbx (collision: Convex)",
        "    Walk: 0 -> 30 @ 24 fps",
    ]


def test_format_batch_empty() -> None:
    assert format_batch(BatchDescriptor()) == ["Output: <not set>", "No files in batch."]


def test_file_exists(tmp_path: Path) -> None:
    model = tmp_path / "model.fbx"
    model.write_bytes(b"fbx")
    assert file_exists(str(model))
    assert not file_exists(str(tmp_path / "missing.fbx"))
    assert not file_exists(str(tmp_path))
    assert not file_exists("")


@pytest.mark.parametrize(
    "directory, expected",
    [
        ("C:/out", "C:/out/"),
        ("C:/out/", "C:/out/"),
        ("C:\\out", "C:\\out\\"),
        ("C:\\out\\", "C:\\out\\"),
        ("/srv/out", "/srv/out/"),
        ("", ""),
    ],
)
def test_with_trailing_separator(directory: str, expected: str) -> None:
    assert with_trailing_separator(directory) == expected
