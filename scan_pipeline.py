"""
scan_pipeline.py

Finds, for every row of a tab-separated data file, the longest dictionary word
hidden inside one of its fields, and keeps the top matches by word length.

With the default configuration this reads the ChEMBL chemreps dump
(chembl_id, canonical_smiles, standard_inchi, standard_inchi_key) and matches
words against the InChI key in column 3, printing "KEY, WORD, CHEMBL_ID".
"""

from typing import Callable, Iterable, List, Optional, Tuple

from diagnostics import debug, warning
from errors import ConfigurationError
from line_sources import iter_dictionary_words, read_lines
from match_collector import MatchCollector, MatchRecord
from trie import Trie

DEFAULT_DICTIONARY_URL = "https://raw.githubusercontent.com/jonbcard/scrabble-bot/master/src/dictionary.txt"
DEFAULT_DATA_URL = "http://ftp.ebi.ac.uk/pub/databases/chembl/ChEMBLdb/latest/chembl_21_chemreps.txt.gz"
DEFAULT_MAX_RESULTS = 10


class ScanConfig:
    """Everything a scan run needs to know, fixed at construction."""

    def __init__(
        self,
        dictionary_source: str = DEFAULT_DICTIONARY_URL,
        data_source: str = DEFAULT_DATA_URL,
        data_gzipped: bool = True,
        ignore_case: bool = True,
        max_results: int = DEFAULT_MAX_RESULTS,
        key_field: int = 3,
        id_field: int = 0,
        delimiter: str = "\t",
        has_header: bool = True,
    ):
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
            raise ConfigurationError(f"number of results must be a positive integer, got {max_results!r}")
        if key_field < 0 or id_field < 0:
            raise ConfigurationError("field indices must not be negative")
        if not delimiter:
            raise ConfigurationError("field delimiter must not be empty")
        self.dictionary_source = dictionary_source
        self.data_source = data_source
        self.data_gzipped = data_gzipped
        self.ignore_case = ignore_case
        self.max_results = max_results
        self.key_field = key_field
        self.id_field = id_field
        self.delimiter = delimiter
        self.has_header = has_header

    @property
    def min_fields(self) -> int:
        return max(self.key_field, self.id_field) + 1

    def __repr__(self):
        return (
            f"ScanConfig(dictionary_source={self.dictionary_source!r}, data_source={self.data_source!r}, "
            f"data_gzipped={self.data_gzipped}, ignore_case={self.ignore_case}, max_results={self.max_results})"
        )


class ScanPipeline:
    def __init__(self, config: ScanConfig, trie: Optional[Trie] = None, warn: Callable[[str], None] = warning):
        self.config = config
        self.trie = trie if trie is not None else Trie(ignore_case=config.ignore_case)
        self.warn = warn
        # diagnostics: one message per data line of the latest scan that could not be parsed
        self.diagnostics: List[str] = []
        # dictionary_loaded: set once every dictionary word has been fed to the trie
        self.dictionary_loaded = False

    def load_dictionary(self, words: Iterable[Optional[str]]) -> int:
        """Insert every word into the trie. Returns the number of words fed."""
        count = 0
        for word in words:
            self.trie.insert(word)
            count += 1
        self.dictionary_loaded = True
        debug(
            f"load_dictionary: {count} words fed, {len(self.trie)} distinct, "
            f"longest is {self.trie.longest_word_length} characters"
        )
        return count

    def process_line(self, line: str, line_index: int, collector: MatchCollector):
        if self.config.has_header and line_index == 0:
            return
        parts = line.strip().split(self.config.delimiter)
        if len(parts) < self.config.min_fields:
            message = (
                f"line {line_index} could not be parsed: expected at least {self.config.min_fields} "
                f"fields, got {len(parts)}: {line!r}"
            )
            self.diagnostics.append(message)
            self.warn(message)
            return

        key = parts[self.config.key_field]
        word = self.trie.longest_substring_match(key)
        if word is not None:
            collector.offer(MatchRecord(len(word), f"{key}, {word}, {parts[self.config.id_field]}"))

    def scan(self, lines: Iterable[Tuple[str, int]]) -> List[MatchRecord]:
        """Match every (text, line_index) pair and return the top records, longest first."""
        self.diagnostics = []
        collector = MatchCollector(self.config.max_results)
        for line, line_index in lines:
            self.process_line(line, line_index, collector)
        return collector.drain_descending()

    def run(self) -> List[MatchRecord]:
        """Load the configured dictionary, then scan the configured data source."""
        debug(f"run: Starting with {self.config!r}")
        self.load_dictionary(iter_dictionary_words(self.config.dictionary_source))
        return self.scan(read_lines(self.config.data_source, gzipped=self.config.data_gzipped))
