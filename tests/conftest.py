"""Pytest configuration and shared fixtures.

The project root is put on ``sys.path`` so ``import batch_converter`` works
when tests are run from the repository root or other locations without an
installed package.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from batch_converter.domain.descriptor import BatchDescriptor, ClipDescriptor, FileEntry  # noqa: E402
from batch_converter.services.notification_service import CollectingNotifier  # noqa: E402


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def walk_batch() -> BatchDescriptor:
    """One file with one clip, as produced by a typical session."""
    batch = BatchDescriptor(output_dir="C:/out/")
    entry = batch.add_file("model.fbx", FileEntry(collision_type="Convex"))
    entry.add_clip("Walk", ClipDescriptor(begin_frame=0.0, end_frame=30.0, fps=24.0))
    return batch
