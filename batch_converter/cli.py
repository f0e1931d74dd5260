"""
Command-Line Interface (CLI) setup for the batch converter.

This module uses Python's `argparse` to define the commands that edit the batch
file and start a conversion, and `run_command` to carry them out. Every
editing command loads the batch file, applies one validated change and saves
it again, so the file always reflects the last accepted edit.
"""
import argparse
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config.common import COLLISION_TYPES
from .pipeline.batch_pipeline import BatchConversionPipeline
from .utils.format_utils import format_batch


def build_parser() -> argparse.ArgumentParser:
    """
    Defines the global options and the sub-commands of the batch converter.

    Returns:
        argparse.ArgumentParser: The configured parser.
    """
    parser = argparse.ArgumentParser(description="Prepare FBX batch conversions for the converter backend.")
    parser.add_argument(
        "--project-dir", type=str, default=None,
        help="Directory holding the batch file (defaults to the current directory)."
    )
    parser.add_argument(
        "--batch-file", type=str, default=None,
        help="Name of the batch file, relative to the project directory."
    )
    parser.add_argument(
        "--backend", type=str, default=None,
        help="Backend executable started by the 'convert' command."
    )
    parser.add_argument(
        "--error-log", type=str, default=None,
        help="Also append warnings and errors to this text file (or a file inside this directory)."
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level."
    )
    parser.add_argument(
        "--debug", action="store_true", dest="debug_mode", help="Shortcut for --log-level DEBUG."
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show", help="Print the batch stored in the batch file.")

    set_output = subparsers.add_parser("set-output", help="Set the output directory.")
    set_output.add_argument("output_dir", help="Directory the backend writes converted files to.")

    add_file = subparsers.add_parser("add-file", help="Add an FBX file to the batch.")
    add_file.add_argument("path", help="Path of the FBX file.")
    add_file.add_argument("--collision", required=True, choices=COLLISION_TYPES,
                          help="Collision mesh to generate.")

    remove_file = subparsers.add_parser("remove-file", help="Remove an FBX file from the batch.")
    remove_file.add_argument("path", help="Path of the FBX file.")

    set_collision = subparsers.add_parser("set-collision", help="Change the collision of a file.")
    set_collision.add_argument("path", help="Path of the FBX file.")
    set_collision.add_argument("collision", choices=COLLISION_TYPES, help="Collision mesh to generate.")

    add_clip = subparsers.add_parser("add-clip", help="Add an animation clip to a file.")
    add_clip.add_argument("path", help="Path of the FBX file.")
    add_clip.add_argument("name", help="Name of the clip, unique within the file.")
    add_clip.add_argument("--begin", required=True, help="First keyframe of the clip.")
    add_clip.add_argument("--end", required=True, help="Last keyframe of the clip.")
    add_clip.add_argument("--fps", required=True, help="Playback rate of the clip.")

    update_clip = subparsers.add_parser("update-clip", help="Change values of an animation clip.")
    update_clip.add_argument("path", help="Path of the FBX file.")
    update_clip.add_argument("name", help="Name of the clip.")
    update_clip.add_argument("--begin", default=None, help="New first keyframe.")
    update_clip.add_argument("--end", default=None, help="New last keyframe.")
    update_clip.add_argument("--fps", default=None, help="New playback rate.")

    remove_clip = subparsers.add_parser("remove-clip", help="Remove an animation clip from a file.")
    remove_clip.add_argument("path", help="Path of the FBX file.")
    remove_clip.add_argument("name", help="Name of the clip.")

    convert = subparsers.add_parser("convert", help="Write the batch file and start the backend.")
    convert.add_argument(
        "--no-launch", action="store_true", help="Only write the batch file, do not start the backend."
    )

    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the batch converter.

    Args:
        argv: The arguments to parse; defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: An object containing the parsed command-line
                            arguments as attributes.
    """
    args = build_parser().parse_args(argv)
    if args.debug_mode:
        args.log_level = "DEBUG"
    return args


def run_command(args: argparse.Namespace, pipeline: Optional[BatchConversionPipeline] = None) -> int:
    """
    Executes the parsed command against the batch file.

    Args:
        args: The parsed command-line arguments.
        pipeline: The pipeline to use; created from `args` when omitted.

    Returns:
        The process exit code.
    """
    if pipeline is None:
        project_dir = Path(args.project_dir) if args.project_dir else Path.cwd()
        pipeline = BatchConversionPipeline(project_dir, args)

    pipeline.load()
    editor = pipeline.editor
    command = args.command

    if command == "show":
        for line in format_batch(pipeline.batch):
            print(line)
        return 0

    if command == "convert":
        pipeline.convert(launch=not args.no_launch)
        return 0

    if command == "set-output":
        editor.set_output_dir(args.output_dir)
    elif command == "add-file":
        editor.add_file(args.path, args.collision)
    elif command == "remove-file":
        editor.remove_file(args.path)
    elif command == "set-collision":
        editor.set_collision_type(args.path, args.collision)
    elif command == "add-clip":
        editor.add_clip(args.path, args.name, args.begin, args.end, args.fps)
    elif command == "update-clip":
        editor.update_clip(args.path, args.name, begin=args.begin, end=args.end, fps=args.fps)
    elif command == "remove-clip":
        editor.remove_clip(args.path, args.name)
    else:
        logger.error(f"Unknown command: {command}")
        return 2

    pipeline.save()
    return 0
