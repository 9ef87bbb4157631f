"""Configuration management for LiteUnit."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from liteunit.core.faults import ALL_CODES, DEFAULT_FATAL_CODES, FaultCode

CONFIG_NAMES = ["liteunit.json", ".liteunit.json"]


class ReportConfig(BaseModel):
    """Report rendering configuration."""

    format: str = Field(default="console", description="Report format (console, html)")
    output_dir: str = Field(default="./reports", description="Directory for HTML report output")
    filename: str = Field(default="test_report.html", description="HTML report filename")
    debug: bool = Field(default=False, description="Show backtraces, operands and timing")
    color: bool = Field(default=True, description="Enable colors in console output")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        allowed = {"console", "html"}
        if v.lower() not in allowed:
            raise ValueError(f"Report format must be one of: {allowed}")
        return v.lower()

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Report filename cannot be empty")
        return v


class FaultConfig(BaseModel):
    """Classification of runtime faults."""

    fatal: list[str] = Field(
        default_factory=lambda: [code.name for code in DEFAULT_FATAL_CODES],
        description="Fault codes that abort the running test (names of FaultCode members)",
    )

    @field_validator("fatal")
    @classmethod
    def validate_fatal(cls, v: list[str]) -> list[str]:
        names = [name.strip().upper() for name in v]
        unknown = [name for name in names if name not in FaultCode.__members__]
        if unknown:
            raise ValueError(f"Unknown fault codes: {', '.join(unknown)}")
        return names

    def fatal_codes(self) -> frozenset[int]:
        """Get the codes that abort the running test."""
        return frozenset(int(FaultCode[name]) for name in self.fatal)

    def warning_codes(self) -> frozenset[int]:
        """Get the codes that are recorded without aborting the running test."""
        fatal = self.fatal_codes()
        return frozenset(int(code) for code in ALL_CODES if int(code) not in fatal)


class SuiteConfig(BaseModel):
    """Main configuration for LiteUnit."""

    title: Optional[str] = Field(default=None, description="Report title (defaults to the suite class name)")
    filter: Optional[str] = Field(default=None, description="Only run tests whose name contains this text")
    report: ReportConfig = Field(default_factory=ReportConfig)
    faults: FaultConfig = Field(default_factory=FaultConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "SuiteConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "SuiteConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        current = start_dir.resolve()
        while True:
            for name in CONFIG_NAMES:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Create liteunit.json or run 'liteunit init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)

    def get_absolute_paths(self, base_dir: Path | str | None = None) -> dict[str, Path]:
        """Get absolute paths for various config paths."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        output_dir = (base_dir / self.report.output_dir).resolve()
        return {
            "report_output_dir": output_dir,
            "report_path": output_dir / self.report.filename,
        }


def get_default_config() -> SuiteConfig:
    """Return a default configuration."""
    return SuiteConfig(
        report=ReportConfig(format="console", debug=False),
        faults=FaultConfig(),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.title = "My unit tests"
    config.to_file(output_path)
    return output_path
