"""
line_sources.py

Readers that turn a named resource (local path or URL, optionally gzip-compressed)
into a lazy stream of text lines, plus the dictionary feed built on top of them.

Besides plain word-list files, the dictionary feed understands two named sources:

    wordfreq[:LANG]   every word known to wordfreq for LANG (default "en")
    wordnet           every WordNet lemma name, via NLTK

Any failure to open, download, decompress or read a resource is raised as a
single LineSourceError naming the resource and whether gzip was requested.
"""

import gzip
import http.client
import io
import os
import time
import urllib.parse
import urllib.request
import zlib
from typing import Iterator, Optional, Tuple

import nltk
from nltk.corpus import wordnet as wn
from wordfreq import iter_wordlist

from diagnostics import debug
from errors import LineSourceError

URL_SCHEMES = ("http", "https", "ftp", "file")
URL_TIMEOUT = 30


def is_url(resource: str) -> bool:
    """Return True if `resource` should be fetched with urllib rather than opened as a path."""
    return urllib.parse.urlparse(resource).scheme.lower() in URL_SCHEMES


def _open_binary(resource: str):
    if is_url(resource):
        debug(f"_open_binary: Opening URL '{resource}'")
        return urllib.request.urlopen(resource, timeout=URL_TIMEOUT)
    path = os.path.abspath(os.path.expanduser(resource))
    debug(f"_open_binary: Opening file '{path}'")
    return open(path, "rb")


def read_lines(resource: str, gzipped: bool = False, encoding: str = "utf-8") -> Iterator[Tuple[str, int]]:
    """
    Yield (text, line_index) for every line of `resource`, line endings removed,
    indices starting at 0. The stream is closed when the generator finishes,
    fails or is closed early.
    """
    started = time.perf_counter()
    line_index = 0
    try:
        with _open_binary(resource) as raw:
            stream = gzip.GzipFile(fileobj=raw, mode="rb") if gzipped else raw
            with io.TextIOWrapper(stream, encoding=encoding, errors="replace") as text:
                for line in text:
                    yield line.rstrip("\r\n"), line_index
                    line_index += 1
    except (OSError, EOFError, ValueError, zlib.error, http.client.HTTPException) as e:
        # URLError, HTTPError and BadGzipFile are all OSError subclasses;
        # HTTPException covers IncompleteRead and BadStatusLine from a bad download;
        # EOFError is a truncated gzip stream, zlib.error a corrupt one and
        # ValueError an unknown URL type.
        raise LineSourceError(resource, gzipped, e) from e

    elapsed_ms = (time.perf_counter() - started) * 1000
    debug(f"read_lines: '{resource}' → {line_index} lines processed in {elapsed_ms:.0f} ms")


################################################################################
# Dictionary feed
################################################################################

def load_wordfreq_words(lang: str = "en") -> Iterator[str]:
    """
    Yield every word wordfreq knows for `lang`, in descending frequency order.
    Raises LineSourceError on failure.
    """
    resource = f"wordfreq:{lang}"
    debug(f"load_wordfreq_words: Loading wordfreq list for '{lang}'")
    try:
        words = list(iter_wordlist(lang))
    except Exception as e:
        raise LineSourceError(resource, False, f"wordfreq loader error: {e}") from e
    if not words:
        raise LineSourceError(resource, False, "wordfreq loader error: no words retrieved")
    debug(f"load_wordfreq_words: {len(words)} entries loaded from wordfreq")
    yield from words


def load_wordnet_words() -> Iterator[str]:
    """
    Ensure WordNet is downloaded, then yield every distinct lemma name made of letters only.
    Raises LineSourceError on failure.
    """
    debug("load_wordnet_words: Loading WordNet lemmas (via NLTK)")
    try:
        wn.ensure_loaded()
    except LookupError:
        debug("load_wordnet_words: WordNet not found locally, downloading via nltk.download('wordnet')")
        try:
            nltk.download("wordnet", quiet=True)
            wn.ensure_loaded()
        except Exception as e:
            raise LineSourceError("wordnet", False, f"WordNet download error: {e}") from e

    lemmas = set()
    try:
        for synset in wn.all_synsets():
            for lemma in synset.lemma_names():
                if lemma.isalpha():
                    lemmas.add(lemma)
    except Exception as e:
        raise LineSourceError("wordnet", False, f"WordNet iteration error: {e}") from e

    if not lemmas:
        raise LineSourceError("wordnet", False, "WordNet loader error: no lemmas found")
    debug(f"load_wordnet_words: {len(lemmas)} unique WordNet lemmas")
    yield from sorted(lemmas)


def iter_dictionary_words(source: str, gzipped: Optional[bool] = None) -> Iterator[str]:
    """
    Yield one candidate word per line of `source`, surrounding whitespace stripped.

    Blank lines come through as "" so the trie can report them. With
    gzipped=None, compression is inferred from a ".gz" suffix.
    """
    if source == "wordnet":
        return load_wordnet_words()
    if source == "wordfreq" or source.startswith("wordfreq:"):
        _, _, lang = source.partition(":")
        return load_wordfreq_words(lang or "en")

    if gzipped is None:
        gzipped = source.lower().endswith(".gz")
    return (line.strip() for line, _ in read_lines(source, gzipped=gzipped))
