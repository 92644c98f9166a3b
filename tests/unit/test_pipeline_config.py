"""
Unit tests for pipeline configuration loading.
"""

import datetime as dt
from pathlib import Path

import pytest
from pydantic import ValidationError

from case_aggregator.core.config import PipelineConfig, PipelineConfigLoader, build_config
from case_aggregator.core.config.pipeline_config import DATA_DIR_ENV


@pytest.mark.unit
class TestPipelineConfig:
    """Tests for PipelineConfig defaults and validation"""

    def test_defaults(self):
        config = PipelineConfig()

        assert config.start_date == dt.date(2020, 1, 22)
        assert config.end_date is None
        assert config.data_dir == Path("data")
        assert config.output_format == "bulk"
        assert config.country_aliases == {"Mainland China": "China"}
        assert config.threshold_pairs() == [
            ("confirmed", 10),
            ("confirmed", 100),
            ("deaths", 10),
            ("deaths", 100),
        ]

    def test_default_end_date_is_yesterday(self):
        config = PipelineConfig()

        assert config.resolve_end_date(today=dt.date(2020, 3, 10)) == dt.date(2020, 3, 9)

    def test_explicit_end_date_wins(self):
        config = PipelineConfig(end_date=dt.date(2020, 2, 1))

        assert config.resolve_end_date(today=dt.date(2020, 3, 10)) == dt.date(2020, 2, 1)

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError, match="after end_date"):
            PipelineConfig(start_date=dt.date(2020, 3, 2), end_date=dt.date(2020, 3, 1))

    def test_start_after_yesterday_rejected(self):
        config = PipelineConfig(start_date=dt.date(2020, 3, 10))

        with pytest.raises(ValueError, match="after end of range"):
            config.resolve_end_date(today=dt.date(2020, 3, 10))

    def test_url_template_needs_placeholder(self):
        with pytest.raises(ValidationError, match="placeholder"):
            PipelineConfig(url_template="https://reports.test/daily.csv")

    def test_unknown_setting_rejected(self):
        with pytest.raises(ValidationError):
            PipelineConfig(retries=3)

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError, match="non-negative"):
            PipelineConfig(thresholds={"confirmed": [-1]})

    @pytest.mark.parametrize("thresholds", [
        {"confirmed": [100], "deaths": [10]},
        {"deaths": [10, 100]},
    ])
    def test_day_counter_threshold_required(self, thresholds):
        """Bulk and CSV output count days from the 10-confirmed crossing"""
        with pytest.raises(ValidationError, match="must include 10"):
            PipelineConfig(thresholds=thresholds)


@pytest.mark.unit
class TestPipelineConfigLoader:
    """Tests for YAML loading and precedence"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PipelineConfigLoader(tmp_path / "missing.yaml")

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text(
            "start_date: 2020-03-01\n"
            "output_format: csv\n"
            "country_aliases:\n"
            "  Mainland China: China\n"
            "  Korea, South: South Korea\n"
            "thresholds:\n"
            "  confirmed: [10, 50]\n"
        )

        config = PipelineConfigLoader(path).load()

        assert config.start_date == dt.date(2020, 3, 1)
        assert config.output_format == "csv"
        assert config.country_aliases["Korea, South"] == "South Korea"
        assert config.threshold_pairs() == [("confirmed", 10), ("confirmed", 50)]

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("")

        assert PipelineConfigLoader(path).load() == PipelineConfig()

    def test_non_mapping_yaml_rejected(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            PipelineConfigLoader(path).load()

    def test_overrides_beat_file_and_none_is_ignored(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text("output_format: csv\ndata_dir: from-file\n")

        config = PipelineConfigLoader(path).load(output_format="json", data_dir=None)

        assert config.output_format == "json"
        assert config.data_dir == Path("from-file")

    def test_environment_beats_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "from-env"))

        config = build_config({"data_dir": "from-file"})

        assert config.data_dir == tmp_path / "from-env"

    def test_override_beats_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv(DATA_DIR_ENV, "from-env")

        config = build_config(data_dir=tmp_path)

        assert config.data_dir == tmp_path
