# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for persontags

Prints the persons and keywords found in image files or folders.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from persontags import __version__
from persontags.exceptions import PersonTagsError
from persontags.scanner import ImageRecord, ScanConfig, batch_extract, scan_image_files, summarize_persons


def _csv_cell(value: str) -> str:
    # Escape quotes in CSV
    return '"' + value.replace('"', '""') + '"'


def format_output(records: List[ImageRecord], format_type: str = "text",
                  summary: Optional[Dict[str, Any]] = None) -> str:
    """
    Format extraction records based on format type.

    Args:
        records: Records to print
        format_type: Output format ('text', 'json', 'csv')
        summary: Optional person summary to append

    Returns:
        Formatted output string
    """
    if format_type == "json":
        payload: Any = [record.to_dict() for record in records]
        if summary is not None:
            payload = {'images': payload, 'summary': summary}
        return json.dumps(payload, indent=2, ensure_ascii=False)

    if format_type == "csv":
        lines = ["SourceFile,Persons,Keywords,Error"]
        for record in records:
            lines.append(",".join([
                _csv_cell(str(record.path)),
                _csv_cell(";".join(record.persons)),
                _csv_cell(";".join(record.keywords)),
                _csv_cell(record.error or ""),
            ]))
        return "\n".join(lines)

    # text format (default)
    lines = []
    for record in records:
        lines.append(f"======== {record.path}")
        if record.error:
            lines.append(f"Error: {record.error}")
            continue
        lines.append(f"Persons: {', '.join(record.persons)}")
        lines.append(f"Keywords: {', '.join(record.keywords)}")
    if summary is not None:
        lines.append(f"{summary['person_count']} person(s) in {summary['image_count']} image(s)")
        for name in summary['person_names']:
            lines.append(f"  {name}")
    return "\n".join(lines)


def collect_files(inputs: List[str], config: ScanConfig) -> List[Path]:
    """Expand directories into image files; plain files are kept as given."""
    files: List[Path] = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            files.extend(scan_image_files(path, config.include_subdirs, config.extensions))
        else:
            files.append(path)
    return files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="persontags",
        description="persontags - List person tags and keywords embedded in image files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read tags from one image
  persontags photo.jpg

  # Scan a folder tree and print JSON with a person summary
  persontags -r -j --summary /path/to/photos
        """
    )
    parser.add_argument('files', nargs='+', help='File(s) or directory(ies) to process')
    parser.add_argument('-r', '--recurse', action='store_true', help='Recursively process directories')
    parser.add_argument('-ext', '--extensions', type=str, help='Comma-separated image extensions to scan for')
    parser.add_argument('-j', '--json', action='store_true', help='Output in JSON format')
    parser.add_argument('-csv', '--csv', action='store_true', help='Output in CSV format')
    parser.add_argument('--summary', action='store_true', help='Append distinct persons across all files')
    parser.add_argument('--fast', action='store_true', help='Skip files without metadata markers in their header')
    parser.add_argument('-w', '--workers', type=int, help='Number of worker threads')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    extensions = args.extensions.split(',') if args.extensions else None
    config = ScanConfig(
        extensions=extensions,
        include_subdirs=args.recurse,
        max_workers=args.workers,
        skip_no_metadata=args.fast,
    )

    try:
        files = collect_files(args.files, config)
    except PersonTagsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    records = batch_extract(files, config)
    summary = summarize_persons(records) if args.summary else None

    format_type = "json" if args.json else "csv" if args.csv else "text"
    output = format_output(records, format_type, summary)
    if output:
        print(output)

    return 1 if any(record.error for record in records) else 0


if __name__ == "__main__":
    sys.exit(main())
