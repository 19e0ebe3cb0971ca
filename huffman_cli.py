#!/usr/bin/env python3
"""
Command line front end for the text Huffman codec.

Modes:
- encrypt: build the tree from the source text, encode the input text and
  write a '0'/'1' bit file
- decrypt: rebuild the tree from the same source text and decode a bit file
- stats: only list frequencies, codes and tree statistics

With no flags the original fixed filenames are used:
    python huffman_cli.py encrypt   # book.txt + begin.txt -> encrypted.txt
    python huffman_cli.py decrypt   # book.txt + encrypted.txt -> decrypted.txt
"""
import sys
import json
import uuid
import logging
import platform
import argparse
from datetime import datetime
from pathlib import Path

from huffman_core import HuffmanError, STRATEGIES, STRATEGY_RESORT
from huffman_service import HuffmanService, StreamIOError

logger = logging.getLogger("huffman_cli")

DEFAULT_SOURCE = "book.txt"
DEFAULT_INPUT = "begin.txt"
DEFAULT_ENCRYPTED = "encrypted.txt"
DEFAULT_DECRYPTED = "decrypted.txt"
ENCODING = "utf-8"

MODES = ("encrypt", "decrypt", "stats")


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_environment_info():
    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "architecture": platform.machine(),
    }


def default_paths(mode):
    """Input and output file names used when no flags are given."""
    if mode == "decrypt":
        return DEFAULT_ENCRYPTED, DEFAULT_DECRYPTED
    return DEFAULT_INPUT, DEFAULT_ENCRYPTED


def print_tables(service, freqs, root):
    for line in service.format_frequencies(freqs):
        print(line)
    print("Huffman Codes:")
    for line in service.format_codes(root):
        print(line)


def run_mode(args):
    """
    Run one codec mode.

    Args:
        args: parsed command line namespace

    Returns:
        dict with the results for the report
    """
    service = HuffmanService(strategy=args.strategy, encoding=ENCODING)
    freqs, root, codes = service.load_tree(args.source)

    if not args.quiet:
        print_tables(service, freqs, root)

    results = {
        "mode": args.mode,
        "strategy": args.strategy,
        "source": str(args.source),
        "source_chars": sum(freqs.values()),
        "distinct_chars": len(freqs),
        "tree": service.logic.tree_stats(root),
        "frequencies": dict(service.logic.sorted_frequencies(freqs)),
        "codes": codes,
    }

    # average code length over the source text
    weighted = sum(freqs[char] * len(code) for char, code in codes.items())
    results["bits_per_char"] = round(weighted / results["source_chars"], 6)

    if args.mode == "encrypt":
        bit_count = service.encode_file(codes, args.input, args.output)
        results.update({"input": str(args.input), "output": str(args.output), "encoded_bits": bit_count})
        print("Encrypted file created successfully!")
    elif args.mode == "decrypt":
        char_count = service.decode_file(root, args.input, args.output)
        results.update({"input": str(args.input), "output": str(args.output), "decoded_chars": char_count})
        print("Decrypted file created successfully!")

    return results


def write_report(report, output_path):
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding=ENCODING) as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
    except OSError as exc:
        raise StreamIOError("writing", output_path, exc) from exc
    print(f"Report saved to: {output_path}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="huffman-text",
        description="Huffman encrypt/decrypt text files as '0'/'1' bit files",
    )
    parser.add_argument("mode", choices=MODES)
    parser.add_argument("--source", default=DEFAULT_SOURCE, help=f"text the tree is built from (default: {DEFAULT_SOURCE})")
    parser.add_argument("--input", default=None, help="file to encode or decode (default depends on mode)")
    parser.add_argument("--output", default=None, help="file to write (default depends on mode)")
    parser.add_argument("--strategy", choices=STRATEGIES, default=STRATEGY_RESORT, help="tree merge strategy (default: resort)")
    parser.add_argument("--report", default=None, help="write a JSON run report to this path")
    parser.add_argument("--quiet", action="store_true", help="do not list frequencies and codes")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    default_input, default_output = default_paths(args.mode)
    if args.input is None:
        args.input = default_input
    if args.output is None:
        args.output = default_output

    run_id = generate_run_id()
    started_at = datetime.now()
    logger.debug("run %s started", run_id)

    try:
        results = run_mode(args)
        success = True
        error_message = None
    except (HuffmanError, StreamIOError) as e:
        logger.critical("Error during %s: %s", args.mode, e)
        results = None
        success = False
        error_message = str(e)

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    if args.report:
        report = {
            "run_id": run_id,
            "started_at": started_at.isoformat(),
            "finished_at": finished_at.isoformat(),
            "duration_seconds": round(duration, 6),
            "success": success,
            "error": error_message,
            "environment": get_environment_info(),
            "results": results,
        }
        try:
            write_report(report, args.report)
        except StreamIOError as e:
            logger.critical("Error saving report: %s", e)
            return 1

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
