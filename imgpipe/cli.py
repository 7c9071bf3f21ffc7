"""
Command Line Interface for reading images and generating thumbnails.
"""

import argparse
import json
import logging
import os
import urllib3
from typing import List, Optional, Tuple, Union

from .concurrency import ConcurrencyLimiter
from .config import ReaderConfig, ThumbnailConfig
from .exceptions import BatchFailedError, ImagePipelineError
from .image_format import ThumbnailFormat
from .image_reader import ImageReader
from .s3_config import S3Config
from .storage import LocalStorage, S3Storage
from .thumbnail_creator import ThumbnailCreator


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('imgpipe')


def parse_size(value: str) -> Union[int, Tuple[int, int]]:
    """Parse '200' or '200x150' into a thumbnail size."""
    try:
        if 'x' in value.lower():
            width, height = value.lower().split('x', 1)
            size = (int(width), int(height))
            if min(size) <= 0:
                raise ValueError
            return size
        size = int(value)
        if size <= 0:
            raise ValueError
        return size
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}") from None


def size_label(size: Union[int, Tuple[int, int]]) -> str:
    if isinstance(size, int):
        return str(size)
    return f"{size[0]}x{size[1]}"


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()

    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_bucket', None):
        config.bucket = args.s3_bucket
    if getattr(args, 's3_prefix', None):
        config.prefix = args.s3_prefix
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key

    return config


def get_storage(args: argparse.Namespace, logger: logging.Logger):
    """
    Get the destination storage for generated thumbnails.

    Returns:
        LocalStorage rooted at --output, or S3Storage when --s3 is given

    Raises:
        ValueError: If the S3 configuration is incomplete
    """
    if not args.s3:
        return LocalStorage(args.output, logger)

    config = get_s3_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("S3 configuration invalid")

    if not config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    return S3Storage(config, logger)


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('-o', '--output', default='.', metavar='DIR',
                             help='Directory receiving thumbnails (default: current directory)')

    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3', action='store_true',
                          help='Upload thumbnails to S3 instead of writing to --output')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-bucket', help='Override S3_BUCKET')
    s3_group.add_argument('--s3-prefix', help='Override S3_PREFIX')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')


def cmd_read(args: argparse.Namespace) -> int:
    """Execute read command."""
    logger = setup_logging(args.verbose)

    config = ReaderConfig.from_env()
    if args.no_crc:
        config.compute_crc = False
    if args.no_md5:
        config.compute_md5 = False

    reader = ImageReader(config, logger=logger)
    try:
        result = reader.read(args.file, strict=args.strict)
    except ImagePipelineError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.valid else 1


def cmd_thumbnail(args: argparse.Namespace) -> int:
    """Execute thumbnail command."""
    logger = setup_logging(args.verbose)

    config = ThumbnailConfig.from_env()
    if args.max_concurrent is not None:
        config.max_concurrent_operations = args.max_concurrent
    if args.quality is not None:
        config.quality = args.quality

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    try:
        storage = get_storage(args, logger)
    except ValueError:
        return 1

    sizes = args.size or [200]
    thumbnail_format = ThumbnailFormat.from_value(args.format) if args.format else None

    reader = ImageReader(ReaderConfig(compute_crc=False, compute_md5=False), logger=logger)
    creator = ThumbnailCreator(
        config, limiter=ConcurrencyLimiter(config.max_concurrent_operations), logger=logger
    )

    try:
        reader_result = reader.read(args.file, strict=True)
        output_format = thumbnail_format or ThumbnailFormat.from_image_format(reader_result.image_format)
        stem = os.path.splitext(os.path.basename(args.file))[0]
        targets = [
            (size, f"{stem}_{size_label(size)}{output_format.extension}")
            for size in sizes
        ]

        logger.info(f"Source: {args.file} ({reader_result.width}x{reader_result.height})")
        logger.info(f"Sizes: {', '.join(size_label(s) for s in sizes)}")
        logger.info(f"Max concurrent operations: {config.max_concurrent_operations}")

        result = creator.generate_and_save_batch(
            args.file,
            targets,
            storage=storage,
            thumbnail_format=output_format,
            reader_result=reader_result,
        )
    except BatchFailedError as e:
        logger.error(str(e))
        for failure in e.failures:
            logger.error(f"  {size_label(failure.size)}: {failure.message}")
        return 1
    except ImagePipelineError as e:
        logger.error(f"Thumbnail generation failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    if not args.quiet:
        for thumbnail in result.succeeded:
            print(f"{thumbnail.destination}: {thumbnail.width}x{thumbnail.height} "
                  f"({thumbnail.byte_length} bytes)")
        for failure in result.failures:
            print(f"{failure.destination}: FAILED ({failure.message})")

    return 0 if result.is_complete else 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='imgpipe',
        description='Image metadata extraction and thumbnail generation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m imgpipe read photo.jpg
  python -m imgpipe thumbnail photo.jpg -s 200 -s 400 -o thumbs --max-concurrent 2

Environment:
  IMGPIPE_COMPUTE_CRC, IMGPIPE_COMPUTE_MD5, IMGPIPE_MAX_CONCURRENT_OPS,
  IMGPIPE_THUMBNAIL_QUALITY, and S3_* for --s3 uploads.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Read command
    read_parser = subparsers.add_parser('read', help='Print format, metadata and checksums as JSON')
    read_parser.add_argument('file', help='Image file')
    read_parser.add_argument('--no-crc', action='store_true', help='Skip the CRC32 checksum')
    read_parser.add_argument('--no-md5', action='store_true', help='Skip the MD5 checksum')
    read_parser.add_argument('--strict', action='store_true',
                             help='Fail instead of reporting partially decoded images')
    read_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    # Thumbnail command
    thumb_parser = subparsers.add_parser('thumbnail', help='Generate thumbnails')
    thumb_parser.add_argument('file', help='Image file')
    thumb_parser.add_argument('-s', '--size', type=parse_size, action='append',
                              help='Bounding box, e.g. 200 or 200x150 (repeatable, default: 200)')
    thumb_parser.add_argument('--max-concurrent', type=int, metavar='N',
                              help='Maximum thumbnails generated at once')
    thumb_parser.add_argument('--quality', type=int, metavar='Q', help='JPEG quality (1-95)')
    thumb_parser.add_argument('--format', choices=[f.value for f in ThumbnailFormat],
                              help='Output format (default: derived from the source)')
    thumb_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress per-file output')
    thumb_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(thumb_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'read':
        return cmd_read(parsed_args)
    elif parsed_args.command == 'thumbnail':
        return cmd_thumbnail(parsed_args)

    return 1
