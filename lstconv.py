#!/usr/bin/env python3
"""
lstconv — annotate assembler listings with flags affected and symbolic operations

Usage:
    python lstconv.py <input.lss|input.lst|directory> [-o OUTPUT_DIR]
                      [--family auto|avr|i8085] [--format txt|csv|xlsx|json|md]
                      [--print] [-v | -q] [--log-file FILE]

Output goes next to each input (same base name, new extension) unless
--output-dir is given. Directories are scanned at the top level only.

Examples:
    python lstconv.py blink.lss                       # blink.csv beside it
    python lstconv.py blink.lss --format xlsx         # styled workbook
    python lstconv.py listings/ -o out --format md
    python lstconv.py monitor.lst --print --format txt
"""

import argparse
import sys

# Fix stdout encoding on Windows (arrows and operators in the symbol column)
if sys.stdout.encoding and sys.stdout.encoding.lower() not in ('utf-8', 'utf8'):
    try:
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
    except AttributeError:
        pass

from lst_annotator import __version__
from lst_annotator.converter import ConversionError, convert, find_listings
from lst_annotator.log_setup import level_from_verbosity, setup_logging
from lst_annotator.output_manager import FORMAT_EXTENSIONS, format_table
from lst_annotator.profiles import PROFILES, UnknownFamilyError
from lst_annotator.records import decode_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lstconv",
        description="Annotate assembler listings with flags affected and symbolic operations",
        epilog="Families: " + ", ".join(f"{k} ({p.extension})" for k, p in PROFILES.items()),
    )
    parser.add_argument("input", help="Listing file or directory of listings")
    parser.add_argument("-o", "--output-dir",
                        help="Output directory (created if missing; default: beside each input)")
    parser.add_argument("--family", default="auto",
                        choices=["auto"] + list(PROFILES.keys()),
                        help="Instruction family (default: pick by file extension)")
    parser.add_argument("--format", default="csv", choices=list(FORMAT_EXTENSIONS.keys()),
                        help="Output format (default: csv)")
    parser.add_argument("--print", dest="print_table", action="store_true",
                        help="Print the annotated table to stdout instead of writing files")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress all output except errors")
    parser.add_argument("--log-file", help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"lstconv {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logging(
        console_level=level_from_verbosity(args.verbose, args.quiet),
        log_file=args.log_file,
    )

    try:
        if args.print_table:
            for listing, profile in find_listings(args.input, args.family):
                log.info("Converting file: %s", listing.name)
                print(format_table(decode_file(listing, profile), profile))
        else:
            written = convert(args.input, args.output_dir, fmt=args.format,
                              family=args.family)
            log.info("Conversion finished: %d file(s) written", len(written))
    except ConversionError as e:
        log.error("%s", e)
        return 1
    except UnknownFamilyError as e:
        log.error("%s", e)
        return 1
    except Exception as e:
        log.error("Internal error: %s", e, exc_info=args.verbose > 1)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
