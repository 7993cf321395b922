"""Command-line interface for running the pipeline on local files.

Provides subcommands for OCR only, summarization of a saved OCR result,
and the full analysis with a JSON export next to the document.
"""

import argparse
import json
import mimetypes
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.errors import LawScannerError
from src.ocr.document_processor import DocumentProcessor
from src.ocr.models import OCRResult
from src.summary.models import SummaryResult
from src.summary.summarizer import Summarizer
from src.utils.config import AppConfig, load_config
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _guess_mime_type(file_path: Path) -> str:
    """Guess a document MIME type from its extension, defaulting to PDF."""
    mime_type, _ = mimetypes.guess_type(file_path.name)
    return mime_type or "application/pdf"


def run_ocr(file_path: Path, config: AppConfig, mime_type: str | None = None) -> OCRResult:
    """Run the OCR stage on a local document.

    Args:
        file_path: Path to the document file.
        config: Application configuration.
        mime_type: MIME type override. Guessed from the extension when omitted.

    Returns:
        The assembled OCR result.
    """
    processor = DocumentProcessor(config.ocr)
    return processor.process(
        file_path.read_bytes(),
        file_path.name,
        mime_type or _guess_mime_type(file_path),
    )


def build_export(ocr_result: OCRResult, summary: SummaryResult) -> dict[str, Any]:
    """Build the analysis export document for a processed file.

    Args:
        ocr_result: OCR result of the document.
        summary: Normalized summary of the document.

    Returns:
        ``{meta, summary, exportedAt}``.
    """
    return {
        "meta": ocr_result.meta.to_dict(),
        "summary": summary.to_dict(),
        "exportedAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


def export_filename(filename: str) -> str:
    """Name of the export file for a document: its stem plus ``-analysis.json``."""
    return f"{Path(filename).stem}-analysis.json"


def analyze_file(
    file_path: Path,
    config: AppConfig,
    user_instructions: str | None = None,
    mime_type: str | None = None,
) -> dict[str, Any]:
    """Run OCR and summarization on a local document.

    Args:
        file_path: Path to the document file.
        config: Application configuration.
        user_instructions: Optional instructions for the summarizer.
        mime_type: MIME type override.

    Returns:
        The export document.
    """
    ocr_result = run_ocr(file_path, config, mime_type)
    summary = Summarizer(config.summarization).summarize(ocr_result, user_instructions)
    return build_export(ocr_result, summary)


def _write_or_print(data: dict[str, Any], output: Path | None) -> None:
    output_str = json.dumps(data, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str)
        print(f"Output written to {output}")
    else:
        print(output_str)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="LawScanner legal document analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    ocr_parser = subparsers.add_parser("ocr", help="Run OCR on a document")
    ocr_parser.add_argument("file", type=Path, help="Document file to process")
    ocr_parser.add_argument("--mime-type", help="Override the detected MIME type")
    ocr_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    summarize_parser = subparsers.add_parser(
        "summarize", help="Summarize a saved OCR result"
    )
    summarize_parser.add_argument("ocr_json", type=Path, help="OCR result JSON file")
    summarize_parser.add_argument("-i", "--instructions", help="Instructions for the model")
    summarize_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Run OCR and summarization and export the analysis"
    )
    analyze_parser.add_argument("file", type=Path, help="Document file to process")
    analyze_parser.add_argument("-i", "--instructions", help="Instructions for the model")
    analyze_parser.add_argument("--mime-type", help="Override the detected MIME type")
    analyze_parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Directory for <name>-analysis.json (default: next to the document)",
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    source = args.ocr_json if args.command == "summarize" else args.file
    if not source.exists():
        print(f"Error: {source} does not exist", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "ocr":
            result = run_ocr(args.file, config, args.mime_type)
            _write_or_print(result.to_dict(), args.output)
        elif args.command == "summarize":
            ocr_data = json.loads(args.ocr_json.read_text())
            summary = Summarizer(config.summarization).summarize(
                ocr_data, args.instructions
            )
            _write_or_print(summary.to_dict(), args.output)
        elif args.command == "analyze":
            export = analyze_file(args.file, config, args.instructions, args.mime_type)
            output_dir = args.output_dir or args.file.parent
            _write_or_print(export, output_dir / export_filename(args.file.name))
    except LawScannerError as exc:
        logger.error("%s: %s", exc.category, exc)
        print(f"Error [{exc.code}]: {exc}", file=sys.stderr)
        sys.exit(1)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        print(f"Error: {source} is not valid JSON: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
