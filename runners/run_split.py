from pathlib import Path
import argparse
import json
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from dotenv import load_dotenv

load_dotenv(ROOT_DIR / ".env")

from app import config
from app.schemas import ErrorResponse, SplitReport
from pipeline.errors import SplitError
from pipeline.models import SplitOptions
from pipeline.split_session import SplitSession, minutes_to_seconds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Split a PCM WAV file into fixed-duration chunks")
    parser.add_argument("input", nargs="?", help=f"Input WAV file (default: {config.DEFAULT_INPUT_PATH})")
    parser.add_argument("chunk_minutes", nargs="?", type=float, help="Chunk length in minutes")
    parser.add_argument("prefix", nargs="?", help="Output filename prefix")
    parser.add_argument("--output-dir", default=config.DEFAULT_OUTPUT_DIR, help="Directory for chunk files")
    parser.add_argument("--chunk-seconds", type=float, help="Chunk length in seconds (overrides minutes)")
    parser.add_argument("--packet-frames", type=int, default=config.DEFAULT_PACKET_FRAMES)
    parser.add_argument("--json", action="store_true", help="Print a JSON report instead of progress")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> SplitOptions:
    if args.input is None and not args.json:
        print("Using default parameters:")
        print(f"  Input file: {config.DEFAULT_INPUT_PATH}")
        print(f"  Chunk duration: {config.DEFAULT_CHUNK_MINUTES:g} minutes")
        print(f"  Output prefix: {config.DEFAULT_PREFIX}")
        print(f"  Output folder: {args.output_dir}")
        print()
        print("To specify custom parameters, use: wav-split <input_file> <chunk_minutes> <output_prefix>")

    minutes = config.DEFAULT_CHUNK_MINUTES if args.chunk_minutes is None else args.chunk_minutes
    if args.chunk_seconds is not None:
        chunk_seconds = args.chunk_seconds
    else:
        chunk_seconds = minutes_to_seconds(minutes)

    return SplitOptions(
        input_path=args.input or config.DEFAULT_INPUT_PATH,
        chunk_duration=chunk_seconds,
        output_dir=args.output_dir,
        prefix=args.prefix or config.DEFAULT_PREFIX,
        packet_frames=args.packet_frames,
        verbose=not (args.quiet or args.json),
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        options = build_options(args)
        result = SplitSession(options).run()
    except (SplitError, OSError, ValueError) as exc:
        if args.json:
            error = ErrorResponse(code=type(exc).__name__, message=str(exc))
            print(json.dumps({"ok": False, "error": error.model_dump()}, indent=2))
        else:
            print(f"❌ Error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(SplitReport.from_result(result).model_dump(), indent=2))
    elif not args.quiet:
        print("WAV file split completed successfully!")
        print(
            f"Created {result.chunk_count} chunks with total duration of "
            f"{float(result.total_duration) / 60:.2f} minutes"
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
