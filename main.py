#!/usr/bin/env python3
"""
stfjson - Lotus Agenda STF to JSON converter

Main entry point. Reads an STF export (standard input by default), converts
it and writes the JSON document to standard output. Diagnostics go to
standard error so they never mix with the JSON.
"""

import logging
import sys
import argparse
from typing import List, Optional

from stfjson import __version__
from stfjson.config import ConfigManager, config
from stfjson.dates import validate_date_format
from stfjson.errors import STFError
from stfjson.importers import STFImporter, dump_blocks


def setup_logging(cfg: ConfigManager = config):
    """Configure logging for the application."""
    level = getattr(logging, str(cfg.log_level).upper(), logging.INFO)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if cfg.log_filename:
        handlers.append(logging.FileHandler(cfg.log_filename))

    logging.basicConfig(
        level=level,
        format=cfg.log_format,
        handlers=handlers
    )


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Convert a Lotus Agenda STF export to JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py < export.stf > export.json
  python main.py export.stf -o export.json
  python main.py --config my_config.yaml export.stf
        """
    )

    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="STF file to convert (default: standard input)"
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Write JSON to this file instead of standard output"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to a configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"stfjson {__version__}"
    )

    return parser.parse_args(argv)


def convert(source, cfg: ConfigManager = config) -> str:
    """
    Convert an STF source to JSON text.

    Args:
        source: A path or a binary stream
        cfg: Configuration to take encoding, date format and layout from

    Returns:
        The pretty-printed JSON document, without a trailing newline
    """
    importer = STFImporter(
        source,
        encoding=cfg.input_encoding,
        date_format=validate_date_format(cfg.default_date_format),
    )
    blocks = importer.get_all_blocks()
    return dump_blocks(blocks, indent=cfg.json_indent, ensure_ascii=cfg.ensure_ascii)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    cfg = ConfigManager(args.config) if args.config else config
    setup_logging(cfg)

    source = getattr(sys.stdin, "buffer", sys.stdin) if args.input == "-" else args.input

    try:
        document = convert(source, cfg)
    except STFError as e:
        logging.error(f"Conversion failed: {e}")
        return 1
    except UnicodeDecodeError as e:
        logging.error(f"Conversion failed: input is not valid {cfg.input_encoding}: {e}")
        return 1
    except OSError as e:
        logging.error(f"Failed to read input: {e}")
        return 1

    try:
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(document + "\n")
            logging.info(f"Wrote JSON to {args.output}")
        else:
            sys.stdout.write(document + "\n")
            sys.stdout.flush()
    except OSError as e:
        logging.error(f"Failed to write output: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
