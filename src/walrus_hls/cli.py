"""Command-line entry points.

Usage:
    walrus-hls video.mp4
    walrus-hls video.mp4 --output ./hls --publish --title "My video"
    walrus-hls --skip-transcode --output ./hls

    walrus-hls-publish --title "My video" --url https://aggregator.../v1/blobs/<id>
    walrus-hls-publish --object-id 0x1234...
"""

import argparse
import sys
from pathlib import Path

from .input_validator import validate_input_file
from .manifest_rewriter import parse_variant_streams
from .publisher import fetch_record, publish_record
from .reporting import format_error_message, format_json_summary, format_record, format_upload_summary
from .shared.config import load_settings
from .shared.exceptions import PipelineError
from .shared.log import get_logger
from .shared.models import MASTER_PLAYLIST_FILENAME
from .transcoder import run_transcode
from .uploader import upload_hls_assets

logger = get_logger("walrus-hls")

DEFAULT_OUTPUT_DIR = "./output"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walrus-hls",
        description="Convert an MP4 file to multi-bitrate HLS and publish it on Walrus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert and upload
  %(prog)s video.mp4

  # Custom output directory, then record the master URL on Sui
  %(prog)s video.mp4 --output ./hls --publish --title "Launch trailer"

  # Upload an existing HLS directory without re-encoding
  %(prog)s --skip-transcode --output ./hls
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="Source MP4 file",
    )
    parser.add_argument(
        "-o", "--output",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for HLS files (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--skip-transcode",
        action="store_true",
        help="Upload the existing contents of --output without running FFmpeg",
    )
    parser.add_argument(
        "--publish",
        action="store_true",
        help="Record the master playlist URL on Sui after uploading",
    )
    parser.add_argument(
        "--title",
        help="Record title (default: source file name)",
    )
    parser.add_argument(
        "--description",
        default="",
        help="Record description",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the convert -> upload -> (publish) pipeline.

    Returns:
        Process exit code (0 on success, 1 on any pipeline error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.skip_transcode and not args.input:
        parser.error("the following arguments are required: input (or use --skip-transcode)")

    output_dir = Path(args.output)

    try:
        settings = load_settings()
        if not args.skip_transcode:
            source = validate_input_file(args.input)
            run_transcode(source, output_dir, settings)

        # Variant info comes from the original, pre-rewrite master on disk
        master_path = output_dir / MASTER_PLAYLIST_FILENAME
        result = upload_hls_assets(output_dir, settings)
        variants = parse_variant_streams(master_path.read_text(encoding="utf-8"))

        record = None
        if args.publish:
            title = args.title or (Path(args.input).stem if args.input else output_dir.resolve().name)
            record = publish_record(title, args.description, result.master_url, settings)

    except PipelineError as e:
        logger.error("Pipeline failed", extra=e.to_dict())
        print(format_error_message(e), file=sys.stderr)
        return 1

    if args.json:
        print(format_json_summary(result, variants, record))
    else:
        print(format_upload_summary(result, variants, record))
    return 0


def build_publish_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walrus-hls-publish",
        description="Create or read a shared video record on Sui",
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--url",
        help="Master playlist URL to record",
    )
    target.add_argument(
        "--object-id",
        help="Read an existing record instead of creating one",
    )
    parser.add_argument(
        "--title",
        help="Record title (required with --url)",
    )
    parser.add_argument(
        "--description",
        default="",
        help="Record description",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    return parser


def publish_main(argv: list[str] | None = None) -> int:
    """Publish (or read back) a record independently of an upload run."""
    parser = build_publish_parser()
    args = parser.parse_args(argv)

    if args.url and not args.title:
        parser.error("--title is required with --url")

    try:
        settings = load_settings()
        if args.object_id:
            record = fetch_record(args.object_id, settings)
        else:
            record = publish_record(args.title, args.description, args.url, settings)
    except PipelineError as e:
        logger.error("Publish failed", extra=e.to_dict())
        print(format_error_message(e), file=sys.stderr)
        return 1

    print(format_record(record, as_json=args.json))
    return 0


if __name__ == "__main__":
    sys.exit(main())
