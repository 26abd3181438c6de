#!/usr/bin/env python3
"""
find_longest_words.py

Loads a word list into a trie, then reads a tab-separated data file (by default the
gzip-compressed ChEMBL chemreps dump) and, for every row, looks for the longest
dictionary word contained in the key column (the InChI key). Prints the N rows with
the longest matches, longest first, as "KEY, WORD, ID".

Usage:
    python find_longest_words.py [N] \
                                 [--dictionary /path/or/url/to/words.txt | wordfreq[:LANG] | wordnet] \
                                 [--data /path/or/url/to/rows.txt.gz] \
                                 [--no-gzip] [--case-sensitive] [--verbose]

Results go to stdout; warnings and (with --verbose) debug information go to stderr.
A source that cannot be read aborts the run with exit status 1.
"""

import argparse
import os
import sys

from diagnostics import debug, set_verbose, warning
from errors import ConfigurationError, LineSourceError
from line_sources import is_url
from scan_pipeline import DEFAULT_DATA_URL, DEFAULT_DICTIONARY_URL, DEFAULT_MAX_RESULTS, ScanConfig, ScanPipeline


def resolve_source(source: str) -> str:
    """Expand and absolutize local paths; leave URLs and named word lists alone."""
    if is_url(source) or source == "wordnet" or source.split(":", 1)[0] == "wordfreq":
        return source
    return os.path.abspath(os.path.expanduser(source))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the rows whose key contains the longest dictionary words."
    )
    parser.add_argument(
        "number", nargs="?", type=int, default=DEFAULT_MAX_RESULTS,
        help=f"How many matches to print (default {DEFAULT_MAX_RESULTS})."
    )
    parser.add_argument(
        "--dictionary", "-d", default=DEFAULT_DICTIONARY_URL,
        help="Word list (one word per line): a path, a URL, 'wordfreq[:LANG]' or 'wordnet'."
    )
    parser.add_argument(
        "--data", "-i", default=DEFAULT_DATA_URL,
        help="Tab-separated data file with a header line: a path or a URL."
    )
    parser.add_argument(
        "--no-gzip", action="store_true",
        help="The data file is plain text rather than gzip-compressed."
    )
    parser.add_argument(
        "--case-sensitive", "-c", action="store_true",
        help="Match words with their exact case instead of upper-casing everything."
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Print debug information to stderr."
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    try:
        config = ScanConfig(
            dictionary_source=resolve_source(args.dictionary),
            data_source=resolve_source(args.data),
            data_gzipped=not args.no_gzip,
            ignore_case=not args.case_sensitive,
            max_results=args.number,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    debug(f"main: Resolved configuration {config!r}")

    pipeline = ScanPipeline(config)

    # 1) Load the dictionary, 2) scan the data rows
    try:
        matches = pipeline.run()
    except LineSourceError as e:
        if pipeline.dictionary_loaded:
            print(f"Error: could not process the data source: {e}", file=sys.stderr)
        else:
            print(f"Error: could not load the dictionary: {e}", file=sys.stderr)
        sys.exit(1)

    # 3) Print results, longest first
    for match in matches:
        print(match.result)

    if pipeline.diagnostics:
        warning(f"{len(pipeline.diagnostics)} line(s) could not be parsed")
    debug(f"main: Exiting normally with {len(matches)} matches")


if __name__ == "__main__":
    main()
