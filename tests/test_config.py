"""Unit tests for config module."""

import json
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import SearchConfig


class TestSearchConfig:
    """Tests for SearchConfig."""

    def test_defaults_are_valid(self):
        config = SearchConfig()
        assert config.strategy == "bisection"
        assert config.quantize_midpoint is False
        assert config.validate() == []

    @pytest.mark.parametrize("overrides", [
        {"strategy": "spiral"},
        {"collinear_tolerance": 0.0},
        {"vertex_tolerance": -1e-6},
        {"collinear_tolerance": 1e-5, "vertex_tolerance": 1e-6},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, overrides):
        config = SearchConfig(**overrides)
        assert len(config.validate()) >= 1

    def test_log_level_case_insensitive(self):
        assert SearchConfig(log_level="debug").validate() == []

    def test_dict_round_trip(self):
        config = SearchConfig(strategy="axis", quantize_midpoint=True, plot_path="out.png")
        restored = SearchConfig.from_dict(config.to_dict())
        assert restored == config

    def test_from_partial_dict(self):
        config = SearchConfig.from_dict({"strategy": "axis"})
        assert config.strategy == "axis"
        assert config.vertex_tolerance == SearchConfig().vertex_tolerance

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="colinear_tolerance"):
            SearchConfig.from_dict({"strategy": "axis", "colinear_tolerance": 1e-6})

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            SearchConfig.load(path)

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "search.json"
        SearchConfig(strategy="axis", log_level="INFO").save(path)

        with open(path) as f:
            assert json.load(f)["strategy"] == "axis"

        loaded = SearchConfig.load(path)
        assert loaded.strategy == "axis"
        assert loaded.log_level == "INFO"

    def test_load_missing_file_gives_defaults(self, tmp_path):
        assert SearchConfig.load(tmp_path / "missing.json") == SearchConfig()
