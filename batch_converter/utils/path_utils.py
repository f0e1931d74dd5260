"""
Filesystem helpers used by the host side of the batch converter.
"""
from pathlib import Path


def file_exists(path: str) -> bool:
    """
    The default existence check used when a batch is written.

    Only regular files count; a directory with the same name does not.
    """
    if not path:
        return False
    try:
        return Path(path).is_file()
    except (OSError, ValueError):
        return False


def with_trailing_separator(directory: str) -> str:
    """
    Returns the directory path ending with a separator.

    The backend concatenates the output directory and the file name, so the
    separator has to be part of the stored value. An existing "/" or "\\" is
    kept as it is.
    """
    if not directory or directory.endswith(("/", "\\")):
        return directory
    separator = "\\" if "\\" in directory and "/" not in directory else "/"
    return directory + separator
