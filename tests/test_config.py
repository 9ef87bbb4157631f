"""Tests for the configuration module."""

import json
import tempfile
from pathlib import Path

import pytest

from liteunit.config import (
    FaultConfig,
    ReportConfig,
    SuiteConfig,
    create_example_config,
    get_default_config,
)
from liteunit.core.faults import FaultCode


class TestReportConfig:
    """Tests for ReportConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = ReportConfig()
        assert config.format == "console"
        assert config.output_dir == "./reports"
        assert config.filename == "test_report.html"
        assert config.debug is False
        assert config.color is True

    def test_format_validation(self):
        """Test that only valid formats are accepted."""
        with pytest.raises(ValueError):
            ReportConfig(format="pdf")

    def test_format_case_insensitive(self):
        """Test that format is case-insensitive."""
        assert ReportConfig(format="HTML").format == "html"

    def test_filename_validation(self):
        """Test that the filename cannot be blank."""
        with pytest.raises(ValueError):
            ReportConfig(filename="  ")


class TestFaultConfig:
    """Tests for FaultConfig."""

    def test_default_values(self):
        """Test that only user errors are fatal by default."""
        config = FaultConfig()
        assert config.fatal == ["USER_ERROR"]
        assert config.fatal_codes() == frozenset({int(FaultCode.USER_ERROR)})

    def test_warning_codes_complement_fatal(self):
        """Test that every code is either fatal or warning-level."""
        config = FaultConfig(fatal=["USER_ERROR", "RUNTIME_WARNING"])
        warning = config.warning_codes()
        assert int(FaultCode.RUNTIME_WARNING) not in warning
        assert int(FaultCode.USER_NOTICE) in warning
        assert len(warning) + len(config.fatal_codes()) == len(FaultCode)

    def test_names_are_normalized(self):
        """Test that code names are case-insensitive."""
        assert FaultConfig(fatal=[" user_notice "]).fatal == ["USER_NOTICE"]

    def test_unknown_code(self):
        """Test that unknown code names are rejected."""
        with pytest.raises(ValueError):
            FaultConfig(fatal=["NOT_A_CODE"])

    def test_nothing_fatal(self):
        """Test an empty fatal list."""
        config = FaultConfig(fatal=[])
        assert len(config.warning_codes()) == len(FaultCode)


class TestSuiteConfig:
    """Tests for SuiteConfig."""

    def test_default_config(self):
        """Test creating a default configuration."""
        config = get_default_config()
        assert config.title is None
        assert config.filter is None
        assert config.report.format == "console"
        assert config.faults.fatal == ["USER_ERROR"]

    def test_from_file(self):
        """Test loading configuration from a file."""
        config_data = {
            "title": "Parser tests",
            "filter": "parse",
            "report": {"format": "html", "debug": True},
            "faults": {"fatal": ["USER_ERROR", "DEPRECATION"]},
        }

        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".json", delete=False
        ) as f:
            json.dump(config_data, f)
            f.flush()

            config = SuiteConfig.from_file(f.name)
            assert config.title == "Parser tests"
            assert config.filter == "parse"
            assert config.report.format == "html"
            assert config.report.debug is True
            assert config.faults.fatal == ["USER_ERROR", "DEPRECATION"]

    def test_from_file_not_found(self):
        """Test loading from non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            SuiteConfig.from_file("/nonexistent/path.json")

    def test_to_file(self):
        """Test saving configuration to a file."""
        config = get_default_config()
        config.title = "Saved suite"

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            config.to_file(path)

            assert path.exists()

            loaded = SuiteConfig.from_file(path)
            assert loaded.title == "Saved suite"

    def test_find_and_load(self):
        """Test finding a configuration file in a parent directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            (base_dir / "liteunit.json").write_text(json.dumps({"title": "Found"}))
            nested = base_dir / "a" / "b"
            nested.mkdir(parents=True)

            config = SuiteConfig.find_and_load(nested)
            assert config.title == "Found"

    def test_find_hidden_config(self):
        """Test finding the dot-file variant."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            (base_dir / ".liteunit.json").write_text(json.dumps({"filter": "fast"}))

            config = SuiteConfig.find_and_load(base_dir)
            assert config.filter == "fast"

    def test_create_example_config(self):
        """Test creating an example configuration file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "example.json"
            result = create_example_config(path)

            assert result == path
            assert path.exists()

            with open(path) as f:
                data = json.load(f)
                assert data["title"] == "My unit tests"
                assert "report" in data
                assert "faults" in data

    def test_get_absolute_paths(self):
        """Test getting absolute paths from config."""
        config = get_default_config()
        config.report.output_dir = "./reports"
        config.report.filename = "suite.html"

        with tempfile.TemporaryDirectory() as tmpdir:
            base_dir = Path(tmpdir)
            paths = config.get_absolute_paths(base_dir)

            assert paths["report_output_dir"].is_absolute()
            assert str(paths["report_output_dir"]).endswith("reports")
            assert paths["report_path"].name == "suite.html"
