"""
This module ties the batch converter together for one command line session.

`BatchConversionPipeline` owns the batch file in the project directory: it
loads the previous batch, exposes it through a `BatchEditor`, writes it back
atomically and starts the backend process that picks the file up.
"""
import argparse
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from loguru import logger

# Domain objects
from ..domain.descriptor import BatchDescriptor
from ..domain.exceptions import (
    BackendLaunchException,
    BatchConverterException,
    SinkFailure,
    SourceFailure,
)

# Services
from ..services.batch_decoder import decode
from ..services.batch_editor import BatchEditor
from ..services.batch_encoder import encode
from ..services.notification_service import (
    CompositeNotifier,
    ErrorLogNotifier,
    LoguruNotifier,
    Notifier,
)
from ..utils.path_utils import file_exists

# Config
from ..config.common import BACKEND_EXECUTABLE, BATCH_FILE_PATH


class BatchConversionPipeline:
    """
    Drives one session of the frontend: load the previous batch, apply edits,
    write the batch file and hand it to the backend.

    The batch file lives in the project directory. It is read once at the start
    of a session and rewritten whenever the batch is saved. Relative input
    paths are checked against the project directory, which is also the working
    directory of the backend process.

    Attributes:
        project_dir (Path): Directory holding the batch file.
        batch_path (Path): Location of the batch file.
        backend (str): Name or path of the backend executable.
        notifier (Notifier): Receives recoverable problems from the codec.
        editor (BatchEditor): Validated access to the current batch.
    """

    def __init__(self, project_dir: Path, args: argparse.Namespace, notifier: Optional[Notifier] = None):
        self.project_dir: Path = project_dir.resolve()
        self.args = args

        batch_file = getattr(args, "batch_file", None) or BATCH_FILE_PATH
        self.batch_path: Path = self.project_dir / batch_file
        self.backend: str = getattr(args, "backend", None) or BACKEND_EXECUTABLE

        if notifier is None:
            notifier = LoguruNotifier()
            error_log = getattr(args, "error_log", None)
            if error_log:
                notifier = CompositeNotifier(notifier, ErrorLogNotifier(Path(error_log)))
        self.notifier = notifier
        self.editor = BatchEditor()

    @property
    def batch(self) -> BatchDescriptor:
        return self.editor.batch

    def exists(self, path: str) -> bool:
        return file_exists(str(self.project_dir / path)) if path else False

    def load(self) -> BatchDescriptor:
        """
        Loads the batch file into a fresh editor.

        A missing batch file starts an empty batch. A malformed one also starts
        an empty batch, after the decoder has reported the problem.

        Raises:
            SourceFailure: If the batch file exists but cannot be read.
        """
        if not self.batch_path.is_file():
            logger.info(f"No batch file at {self.batch_path}, starting with an empty batch.")
            self.editor = BatchEditor()
            return self.batch

        try:
            with self.batch_path.open("rb") as f:
                batch = decode(f, self.notifier)
        except OSError as e:
            raise SourceFailure(f"Unable to open {self.batch_path}: {e}") from e

        self.editor = BatchEditor(batch)
        logger.info(f"Loaded {len(batch.files)} file(s) from {self.batch_path}")
        return batch

    def save(self) -> Path:
        """
        Writes the current batch to the batch file.

        The document goes to a temporary file next to the batch file, which then
        replaces it. A failed save leaves the previous batch file as it was.

        Returns:
            The path of the written batch file.

        Raises:
            SinkFailure: If the batch file cannot be written.
        """
        temp_path = self.batch_path.with_name(self.batch_path.name + ".tmp")
        try:
            self.batch_path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("wb") as f:
                encode(self.batch, f, self.exists, self.notifier)
            os.replace(temp_path, self.batch_path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise SinkFailure(f"Unable to write {self.batch_path}: {e}") from e
        except BatchConverterException:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Saved batch to {self.batch_path}")
        return self.batch_path

    def resolve_backend(self) -> str:
        local_backend = self.project_dir / self.backend
        if local_backend.is_file():
            return str(local_backend)
        return shutil.which(self.backend) or self.backend

    def launch_backend(self) -> subprocess.Popen:
        """
        Starts the backend in the project directory without waiting for it.

        The backend reads the batch file on its own; there is no further
        communication with it.

        Raises:
            BackendLaunchException: If the executable cannot be started.
        """
        executable = self.resolve_backend()
        logger.info(f"Launching backend: {executable}")
        try:
            return subprocess.Popen([executable], cwd=self.project_dir)
        except OSError as e:
            raise BackendLaunchException(f"Unable to start backend '{executable}': {e}") from e

    def convert(self, launch: bool = True) -> Optional[subprocess.Popen]:
        """
        Checks the batch, writes the batch file and starts the backend.

        Raises:
            EmptyBatchException: If the batch has no files.
            MissingOutputDirException: If no output directory is set.
            SinkFailure: If the batch file cannot be written.
            BackendLaunchException: If the backend cannot be started.
        """
        self.editor.check_ready()
        self.save()
        if not launch:
            logger.info("Backend launch disabled, batch file written only.")
            return None
        return self.launch_backend()
