from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from batch_converter.domain.descriptor import BatchDescriptor, ClipDescriptor
from batch_converter.domain.exceptions import (
    BackendLaunchException,
    EmptyBatchException,
    MissingOutputDirException,
    SinkFailure,
)
from batch_converter.pipeline import batch_pipeline
from batch_converter.pipeline.batch_pipeline import BatchConversionPipeline
from batch_converter.services.notification_service import CollectingNotifier, LoguruNotifier, Severity


def _args(**overrides) -> argparse.Namespace:
    values = {"batch_file": "batch.xml", "backend": "converter_backend", "error_log": None}
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "model.fbx").write_bytes(b"fbx")
    (tmp_path / "crate.fbx").write_bytes(b"fbx")
    return tmp_path


@pytest.fixture
def pipeline(project_dir: Path, notifier: CollectingNotifier) -> BatchConversionPipeline:
    return BatchConversionPipeline(project_dir, _args(), notifier=notifier)


class FakePopen:
    calls: list = []

    def __init__(self, command, cwd=None):
        FakePopen.calls.append((command, cwd))


@pytest.fixture
def fake_popen(monkeypatch) -> type:
    FakePopen.calls = []
    monkeypatch.setattr(batch_pipeline.subprocess, "Popen", FakePopen)
    return FakePopen


def test_load_without_batch_file_starts_empty(pipeline: BatchConversionPipeline, notifier) -> None:
    batch = pipeline.load()
    assert batch == BatchDescriptor()
    assert notifier.messages == []


def test_save_and_load_round_trip(pipeline: BatchConversionPipeline, project_dir: Path, notifier) -> None:
    pipeline.load()
    pipeline.editor.set_output_dir("out")
    pipeline.editor.add_file("model.fbx", "Convex")
    pipeline.editor.add_clip("model.fbx", "Walk", "0", "30", "24")
    pipeline.editor.add_file("crate.fbx", "None")

    written = pipeline.save()

    assert written == project_dir.resolve() / "batch.xml"
    assert not (project_dir / "batch.xml.tmp").exists()

    reloaded = BatchConversionPipeline(project_dir, _args(), notifier=notifier).load()
    assert reloaded == pipeline.batch
    assert list(reloaded.files) == ["model.fbx", "crate.fbx"]
    assert reloaded.files["model.fbx"].clips["Walk"] == ClipDescriptor(0.0, 30.0, 24.0)
    assert notifier.messages == []


def test_save_skips_files_missing_from_project(pipeline: BatchConversionPipeline, project_dir: Path, notifier) -> None:
    pipeline.editor.set_output_dir("out")
    pipeline.editor.add_file("missing.fbx", "None")
    pipeline.editor.add_file("model.fbx", "None")

    pipeline.save()

    assert notifier.with_severity(Severity.WARNING) == [
        "Unable to find file missing.fbx.\nThis file will be skipped."
    ]
    reloaded = BatchConversionPipeline(project_dir, _args(), notifier=CollectingNotifier()).load()
    assert list(reloaded.files) == ["model.fbx"]


def test_absolute_paths_are_checked_as_given(pipeline: BatchConversionPipeline, tmp_path_factory) -> None:
    elsewhere = tmp_path_factory.mktemp("assets") / "hero.fbx"
    elsewhere.write_bytes(b"fbx")
    assert pipeline.exists(str(elsewhere))
    assert pipeline.exists("model.fbx")
    assert not pipeline.exists("hero.fbx")
    assert not pipeline.exists("")


def test_load_malformed_batch_file(pipeline: BatchConversionPipeline, project_dir: Path, notifier) -> None:
    (project_dir / "batch.xml").write_text("<BatchConversion><Output>out/", encoding="utf-8")

    batch = pipeline.load()

    assert batch == BatchDescriptor()
    assert len(notifier.with_severity(Severity.ERROR)) == 1


def test_failed_save_keeps_previous_file(pipeline: BatchConversionPipeline, project_dir: Path) -> None:
    batch_path = project_dir / "batch.xml"
    batch_path.mkdir()
    pipeline.editor.set_output_dir("out")

    with pytest.raises(SinkFailure):
        pipeline.save()

    assert batch_path.is_dir()
    assert not (project_dir / "batch.xml.tmp").exists()


def test_error_log_receives_notifications(project_dir: Path) -> None:
    log_path = project_dir / "errors.txt"
    pipeline = BatchConversionPipeline(project_dir, _args(error_log=str(log_path)))
    pipeline.editor.add_file("missing.fbx", "None")

    pipeline.save()

    assert "Unable to find file missing.fbx." in log_path.read_text(encoding="utf-8")


def test_convert_requires_files(pipeline: BatchConversionPipeline, fake_popen) -> None:
    pipeline.load()
    with pytest.raises(EmptyBatchException):
        pipeline.convert()
    assert fake_popen.calls == []


def test_convert_requires_output_dir(pipeline: BatchConversionPipeline, project_dir: Path, fake_popen) -> None:
    pipeline.editor.add_file("model.fbx", "None")
    with pytest.raises(MissingOutputDirException):
        pipeline.convert()
    assert not (project_dir / "batch.xml").exists()


def test_convert_writes_batch_and_launches_backend(
    pipeline: BatchConversionPipeline, project_dir: Path, fake_popen
) -> None:
    pipeline.editor.set_output_dir("out")
    pipeline.editor.add_file("model.fbx", "Concave")

    process = pipeline.convert()

    assert isinstance(process, FakePopen)
    assert (project_dir / "batch.xml").is_file()
    assert fake_popen.calls == [(["converter_backend"], project_dir.resolve())]


def test_convert_without_launch(pipeline: BatchConversionPipeline, project_dir: Path, fake_popen) -> None:
    pipeline.editor.set_output_dir("out")
    pipeline.editor.add_file("model.fbx", "Concave")

    assert pipeline.convert(launch=False) is None
    assert (project_dir / "batch.xml").is_file()
    assert fake_popen.calls == []


def test_backend_in_project_dir_is_preferred(pipeline: BatchConversionPipeline, project_dir: Path) -> None:
    local_backend = project_dir / "converter_backend"
    local_backend.write_bytes(b"")
    assert pipeline.resolve_backend() == str(project_dir.resolve() / "converter_backend")


def test_backend_launch_failure(pipeline: BatchConversionPipeline, monkeypatch) -> None:
    def failing_popen(command, cwd=None):
        raise FileNotFoundError(2, "No such file or directory", command[0])

    monkeypatch.setattr(batch_pipeline.subprocess, "Popen", failing_popen)

    with pytest.raises(BackendLaunchException):
        pipeline.launch_backend()


def test_default_notifier_is_loguru(project_dir: Path) -> None:
    pipeline = BatchConversionPipeline(project_dir, argparse.Namespace())
    assert pipeline.batch_path.name == "batch.xml"
    assert pipeline.backend
    assert isinstance(pipeline.notifier, LoguruNotifier)


def test_pipeline_module_is_documented() -> None:
    assert batch_pipeline.__doc__
    assert "BatchConversionPipeline" in batch_pipeline.__doc__
