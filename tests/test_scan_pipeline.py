import gzip
from unittest.mock import Mock

import pytest

from errors import ConfigurationError, LineSourceError
from match_collector import MatchCollector, MatchRecord
from scan_pipeline import DEFAULT_DATA_URL, DEFAULT_DICTIONARY_URL, ScanConfig, ScanPipeline
from trie import Trie

HEADER = "chembl_id\tcanonical_smiles\tstandard_inchi\tstandard_inchi_key"


def row(chembl_id, key):
    return f"{chembl_id}\tC\tInChI=1S/C\t{key}"


def numbered(lines):
    return [(text, index) for index, text in enumerate(lines)]


@pytest.fixture
def pipeline():
    p = ScanPipeline(ScanConfig(max_results=3), warn=Mock())
    p.load_dictionary(["cat", "catalog", "dog", "zebra"])
    return p


class TestScanConfig:

    def test_defaults(self):
        config = ScanConfig()
        assert config.dictionary_source == DEFAULT_DICTIONARY_URL
        assert config.data_source == DEFAULT_DATA_URL
        assert config.data_gzipped is True
        assert config.ignore_case is True
        assert config.max_results == 10
        assert config.key_field == 3
        assert config.id_field == 0
        assert config.delimiter == "\t"
        assert config.min_fields == 4

    @pytest.mark.parametrize("max_results", [0, -5, 1.5, None])
    def test_invalid_max_results(self, max_results):
        with pytest.raises(ConfigurationError):
            ScanConfig(max_results=max_results)

    def test_invalid_fields(self):
        with pytest.raises(ConfigurationError):
            ScanConfig(key_field=-1)
        with pytest.raises(ConfigurationError):
            ScanConfig(delimiter="")

    def test_min_fields_follows_highest_index(self):
        assert ScanConfig(key_field=1, id_field=5).min_fields == 6


class TestLoadDictionary:

    def test_counts_words_fed(self, pipeline):
        assert len(pipeline.trie) == 4
        assert pipeline.trie.longest_word_length == 7

    def test_blank_words_are_reported_not_inserted(self, capsys):
        p = ScanPipeline(ScanConfig())
        assert p.load_dictionary(["ab", "", "cd"]) == 3
        assert len(p.trie) == 2
        assert "invalid empty word" in capsys.readouterr().err

    def test_trie_follows_case_setting(self):
        p = ScanPipeline(ScanConfig(ignore_case=False))
        assert p.trie.ignore_case is False

    def test_uses_given_trie(self):
        trie = Trie()
        trie.insert("OWL")
        p = ScanPipeline(ScanConfig(), trie=trie)
        assert p.trie is trie
        assert p.trie.contains_word("owl")


class TestProcessLine:

    def test_header_is_skipped(self, pipeline):
        collector = MatchCollector(3)
        pipeline.process_line(row("CHEMBL1", "CATALOGXX"), 0, collector)
        assert len(collector) == 0

    def test_match_is_rendered(self, pipeline):
        collector = MatchCollector(3)
        pipeline.process_line(row("CHEMBL7", "XXCATALOGXX-UHFFFAOYSA-N"), 5, collector)
        assert collector.drain_descending() == [
            MatchRecord(7, "XXCATALOGXX-UHFFFAOYSA-N, CATALOG, CHEMBL7"),
        ]

    def test_no_match_contributes_nothing(self, pipeline):
        collector = MatchCollector(3)
        pipeline.process_line(row("CHEMBL7", "QQQQ-UHFFFAOYSA-N"), 1, collector)
        assert len(collector) == 0
        assert pipeline.diagnostics == []

    def test_short_row_is_reported(self, pipeline):
        collector = MatchCollector(3)
        pipeline.process_line("CHEMBL1\tC\tCATALOG", 4, collector)
        assert len(collector) == 0
        assert len(pipeline.diagnostics) == 1
        assert "line 4 could not be parsed" in pipeline.diagnostics[0]
        pipeline.warn.assert_called_once_with(pipeline.diagnostics[0])

    def test_surrounding_whitespace_is_trimmed(self, pipeline):
        collector = MatchCollector(3)
        pipeline.process_line(row("CHEMBL2", "ZZDOGZZ") + "\t\n", 2, collector)
        assert collector.drain_descending() == [MatchRecord(3, "ZZDOGZZ, DOG, CHEMBL2")]

    def test_no_header(self):
        p = ScanPipeline(ScanConfig(has_header=False), warn=Mock())
        p.load_dictionary(["dog"])
        collector = MatchCollector(1)
        p.process_line(row("CHEMBL1", "HOTDOG"), 0, collector)
        assert len(collector) == 1


class TestScan:

    def test_top_matches_longest_first(self, pipeline):
        lines = numbered([
            HEADER,
            row("CHEMBL1", "AADOGAA"),
            row("CHEMBL2", "CONCATALOGUE"),
            row("CHEMBL3", "NOTHINGHERE"),
            row("CHEMBL4", "ZEBRAFISH"),
            row("CHEMBL5", "XCATX"),
        ])
        results = pipeline.scan(lines)
        assert [r.result for r in results] == [
            "CONCATALOGUE, CATALOG, CHEMBL2",
            "ZEBRAFISH, ZEBRA, CHEMBL4",
            results[2].result,
        ]
        # DOG and CAT tie on length; either may hold the last slot.
        assert results[2].length == 3
        assert results[2].result in {"AADOGAA, DOG, CHEMBL1", "XCATX, CAT, CHEMBL5"}

    def test_malformed_row_does_not_stop_scan(self, pipeline):
        lines = numbered([
            HEADER,
            "CHEMBL1\tC\tCATALOG",
            row("CHEMBL2", "HOTDOG"),
            row("CHEMBL3", "ZEBRA"),
        ])
        results = pipeline.scan(lines)
        assert len(pipeline.diagnostics) == 1
        assert [r.result for r in results] == ["ZEBRA, ZEBRA, CHEMBL3", "HOTDOG, DOG, CHEMBL2"]

    def test_result_count_never_exceeds_max(self, pipeline):
        lines = numbered([HEADER] + [row(f"CHEMBL{i}", "XXCATXX") for i in range(20)])
        results = pipeline.scan(lines)
        assert len(results) == 3
        assert all(r.length == 3 for r in results)

    def test_empty_input(self, pipeline):
        assert pipeline.scan([]) == []

    def test_each_scan_starts_empty(self, pipeline):
        lines = numbered([HEADER, row("CHEMBL1", "HOTDOG")])
        assert len(pipeline.scan(lines)) == 1
        assert len(pipeline.scan(lines)) == 1

    def test_diagnostics_are_per_scan(self, pipeline):
        lines = numbered([HEADER, "CHEMBL1\tC", row("CHEMBL2", "HOTDOG")])
        pipeline.scan(lines)
        pipeline.scan(lines)
        assert len(pipeline.diagnostics) == 1
        assert "line 1 could not be parsed" in pipeline.diagnostics[0]


class TestRun:

    def test_dictionary_loaded_flag(self, tmp_path):
        dictionary = tmp_path / "dictionary.txt"
        dictionary.write_text("cat\n", encoding="utf-8")
        config = ScanConfig(dictionary_source=str(dictionary), data_source=str(tmp_path / "missing.gz"))
        pipeline = ScanPipeline(config)
        assert pipeline.dictionary_loaded is False
        with pytest.raises(LineSourceError):
            pipeline.run()
        assert pipeline.dictionary_loaded is True

    def test_missing_dictionary_stops_before_data(self, tmp_path):
        config = ScanConfig(dictionary_source=str(tmp_path / "missing.txt"), data_source=str(tmp_path / "missing.gz"))
        pipeline = ScanPipeline(config)
        with pytest.raises(LineSourceError) as excinfo:
            pipeline.run()
        assert excinfo.value.resource == str(tmp_path / "missing.txt")
        assert pipeline.dictionary_loaded is False

    def test_run_reads_configured_sources(self, tmp_path):
        dictionary = tmp_path / "dictionary.txt"
        dictionary.write_text("cat\ncatalog\ndog\n", encoding="utf-8")
        data = tmp_path / "chemreps.txt.gz"
        with gzip.open(data, "wt", encoding="utf-8") as f:
            f.write("\n".join([HEADER, row("CHEMBL1", "HOTDOG"), row("CHEMBL2", "CATALOGUE")]) + "\n")

        config = ScanConfig(dictionary_source=str(dictionary), data_source=str(data), max_results=5)
        results = ScanPipeline(config).run()

        assert [r.result for r in results] == ["CATALOGUE, CATALOG, CHEMBL2", "HOTDOG, DOG, CHEMBL1"]

    def test_run_missing_data_source(self, tmp_path):
        dictionary = tmp_path / "dictionary.txt"
        dictionary.write_text("cat\n", encoding="utf-8")
        config = ScanConfig(dictionary_source=str(dictionary), data_source=str(tmp_path / "missing.gz"))
        with pytest.raises(LineSourceError) as excinfo:
            ScanPipeline(config).run()
        assert excinfo.value.gzipped is True
