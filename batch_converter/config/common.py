"""
Common configuration settings used throughout the application.

This module holds the constants shared by the descriptor codec, the editor and
the conversion pipeline: the wire names of the batch descriptor document,
collision generation types, logging formats and file locations. It also loads
user-specific paths from an optional YAML file so the backend executable can be
configured without modifying the source code.
"""
from pathlib import Path

import yaml
from loguru import logger

# --- Batch File Location ---

# The well-known interchange file. The frontend writes it in the working
# directory and the backend reads the same path on its own.
BATCH_FILE_NAME = "batch.xml"

# The backend executable launched after the batch file has been written.
# It is looked up in the project directory first, then on the system PATH.
DEFAULT_BACKEND_EXECUTABLE = "converter_backend"

# --- User-Defined Path Configuration ---
# This block loads user-specific paths from a 'config.user.yaml' file located
# at the project root, e.g.
#
#   paths:
#     batch_file: batch.xml
#     backend_executable: C:/tools/converter_backend.exe

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

BATCH_FILE_PATH: Path = Path(BATCH_FILE_NAME)
BACKEND_EXECUTABLE: str = DEFAULT_BACKEND_EXECUTABLE

if USER_CONFIG_PATH.is_file():
    try:
        with USER_CONFIG_PATH.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
        if user_config and "paths" in user_config:
            paths_config = user_config.get("paths") or {}
            batch_file_str = paths_config.get("batch_file")
            backend_str = paths_config.get("backend_executable")

            if batch_file_str:
                BATCH_FILE_PATH = Path(batch_file_str)
            if backend_str:
                BACKEND_EXECUTABLE = str(backend_str)
    except (OSError, yaml.YAMLError, AttributeError) as e:
        logger.warning(f"Could not load or parse '{USER_CONFIG_PATH}': {e}")
else:
    logger.debug(f"User config '{USER_CONFIG_PATH}' not found. Using default paths.")


# --- Descriptor Document Format ---
# Element and attribute names of the batch descriptor. Both the frontend and
# the backend depend on these exact names.

ELEMENT_ROOT = "BatchConversion"
ELEMENT_OUTPUT = "Output"
ELEMENT_FILE = "FbxFile"
ELEMENT_FILENAME = "Filename"
ELEMENT_COLLISION = "CollisionGeneration"
ELEMENT_CLIP = "AnimClip"
ELEMENT_CLIP_NAME = "Name"
ELEMENT_KEYFRAMES = "Keyframes"
ATTRIBUTE_BEGIN = "Begin"
ATTRIBUTE_END = "End"
ATTRIBUTE_FPS = "FPS"

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
XML_INDENT = "\t"

# Size of the chunks read from a source stream while decoding.
READ_CHUNK_SIZE = 64 * 1024


# --- Collision Generation Types ---
# The tag stored per file. An empty string means the user has not chosen yet;
# the backend treats anything other than Convex/Concave as "None".

COLLISION_NONE = "None"
COLLISION_CONVEX = "Convex"
COLLISION_CONCAVE = "Concave"
COLLISION_UNSET = ""
COLLISION_TYPES = (COLLISION_NONE, COLLISION_CONVEX, COLLISION_CONCAVE)


# --- Logging Configuration ---

LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# A separator line written between events in the plain text error log.
ERROR_LOG_SEPARATOR = "=" * 50

DEFAULT_ERROR_LOG_FILENAME = "batch_errors.txt"
