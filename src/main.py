# src/main.py — v2
"""CLI entry point: encode, decode, remove, stamp and batch commands.

Usage:
    endecode encode <dir> --text "ORDER 001"
    endecode decode <dir>
    endecode remove <dir>
    endecode stamp <dir> --text "001" --photo-number 1
    endecode batch <dir> -n 3 --base-text "ORDER 1" [--swap] [--visible] [--zip]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from endecode.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        _setup_logging(args.verbose)
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="endecode",
        description=f"endecode v{__version__}: invisible file watermarks and numbered copies",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- encode ---
    p_encode = subparsers.add_parser(
        "encode", help="Add a watermark to every supported file of a folder",
    )
    p_encode.add_argument("directory", type=Path, help="Folder to watermark")
    p_encode.add_argument("-t", "--text", required=True, help="Watermark text")
    p_encode.set_defaults(func=_cmd_encode)

    # --- decode ---
    p_decode = subparsers.add_parser(
        "decode", help="Show the watermark of every supported file of a folder",
    )
    p_decode.add_argument("directory", type=Path, help="Folder to inspect")
    p_decode.add_argument(
        "-a", "--all", action="store_true",
        help="Also list files without a watermark",
    )
    p_decode.set_defaults(func=_cmd_decode)

    # --- remove ---
    p_remove = subparsers.add_parser(
        "remove", help="Remove watermarks from every supported file of a folder",
    )
    p_remove.add_argument("directory", type=Path, help="Folder to clean")
    p_remove.set_defaults(func=_cmd_remove)

    # --- stamp ---
    p_stamp = subparsers.add_parser(
        "stamp", help="Draw visible text onto one numbered photo",
    )
    p_stamp.add_argument("directory", type=Path, help="Folder holding the photo")
    p_stamp.add_argument("-t", "--text", required=True, help="Text to draw")
    p_stamp.add_argument(
        "-p", "--photo-number", type=int, required=True,
        help="Number in the photo's filename (e.g. 1 for Photo-001.jpg)",
    )
    p_stamp.set_defaults(func=_cmd_stamp)

    # --- batch ---
    p_batch = subparsers.add_parser(
        "batch", help="Create numbered, watermarked copies of a folder",
    )
    p_batch.add_argument("directory", type=Path, help="Source folder")
    p_batch.add_argument(
        "-n", "--num-copies", type=int, required=True,
        help="Number of copies to create",
    )
    p_batch.add_argument(
        "-b", "--base-text", required=True,
        help="Watermark prefix; trailing digits set the first order number",
    )
    p_batch.add_argument(
        "--swap", action="store_true",
        help="Swap photo N with photo N+10 in each copy",
    )
    p_batch.add_argument(
        "--visible", action="store_true",
        help="Draw the order number onto one photo of each copy",
    )
    p_batch.add_argument(
        "--zip", action="store_true",
        help="Replace each copy with an uncompressed ZIP archive",
    )
    p_batch.add_argument(
        "--watermark-text", default=None,
        help="Visible text (default: the order number)",
    )
    p_batch.add_argument(
        "--photo-number", type=int, default=None,
        help="Photo to draw on (default: the order number)",
    )
    p_batch.set_defaults(func=_cmd_batch)

    return parser


async def _cmd_encode(args: argparse.Namespace) -> int:
    """Embed a watermark into a folder."""
    from endecode.api.facade import encode_folder

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    report = await encode_folder(directory, args.text)

    print(f"\nEncode complete:")
    print(f"  Files found:  {report.total_files}")
    print(f"  Added:        {report.count('added')}")
    print(f"  Duplicates:   {report.count('duplicate')}")
    print(f"  Errors:       {report.errors}")
    return 1 if report.errors else 0


async def _cmd_decode(args: argparse.Namespace) -> int:
    """Print decoded watermarks for a folder."""
    from endecode.api.facade import decode_folder

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    report = await decode_folder(directory)

    for inspection in report.inspections:
        name = inspection.path.relative_to(directory.resolve())
        if inspection.status == "current":
            print(f"{name}: {inspection.text}")
        elif inspection.status == "legacy":
            print(f"{name}: {inspection.text} (legacy format)")
        elif inspection.status == "partial":
            print(f"{name}: partial watermark found")
        elif args.all:
            print(f"{name}: no watermark")

    print(f"\n{len(report.watermarked)} of {len(report.inspections)} files watermarked")
    return 0


async def _cmd_remove(args: argparse.Namespace) -> int:
    """Strip watermarks from a folder."""
    from endecode.api.facade import remove_folder_watermarks

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    report = await remove_folder_watermarks(directory)

    print(f"\nRemove complete:")
    print(f"  Files found:  {report.total_files}")
    print(f"  Removed:      {report.count('removed')}")
    print(f"  Unchanged:    {report.count('unchanged')}")
    print(f"  Errors:       {report.errors}")
    return 1 if report.errors else 0


async def _cmd_stamp(args: argparse.Namespace) -> int:
    """Render visible text onto one photo."""
    from endecode.api.facade import stamp_photo

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    report = await stamp_photo(directory, args.photo_number, args.text)
    if report.target is None:
        print(f"No photo with number {args.photo_number} found in {directory}")
        return 1
    if not report.applied:
        print(f"Failed to add text to {report.target.name}")
        return 1
    print(f"Added text to {report.target.name}")
    return 0


async def _cmd_batch(args: argparse.Namespace) -> int:
    """Execute a batch copy run."""
    from endecode.api.facade import run_batch
    from endecode.batch.models import BatchRequest

    directory: Path = args.directory
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    request = BatchRequest(
        source_folder=directory,
        num_copies=args.num_copies,
        base_text=args.base_text,
        add_swap=args.swap,
        add_watermark=args.visible,
        create_zip=args.zip,
        watermark_text=args.watermark_text,
        photo_number=args.photo_number,
    )
    result = await run_batch(request)

    print(f"\nBatch {result.status}:")
    print(f"  Copies:       {', '.join(result.order_numbers)}")
    print(f"  Output:       {result.copies_root}")
    print(f"  Embedded:     {result.files_embedded}")
    print(f"  Errors:       {result.errors}")
    print(f"  Duration:     {result.duration_seconds:.1f}s")
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage from settings."""
    from endecode.config.settings import Settings
    from endecode.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
