"""
Application settings and configuration management.

Provides dataclasses for all configurable aspects of the motion pipeline,
including angle solving, recording and export settings.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional
import logging

import yaml

logger = logging.getLogger(__name__)


class ExportFormat(Enum):
    """Supported export formats."""
    XML = "xml"
    JSON = "json"
    CSV = "csv"


@dataclass
class SolverConfig:
    """Configuration for the kinematic angle solver."""

    # Store the ankle pitch as -20 degrees instead of the historical
    # radian value
    ankle_pitch_in_degrees: bool = False

    # Raise on degenerate joint geometry instead of zeroing the joint
    strict: bool = False

    # The Pelvis slot carries the derived pelvis angles, not a position:
    # solving zeroes the Pelvis position
    legacy_pelvis: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "ankle_pitch_in_degrees": self.ankle_pitch_in_degrees,
            "strict": self.strict,
            "legacy_pelvis": self.legacy_pelvis,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SolverConfig":
        """Create from dictionary."""
        config = cls()
        for key, value in data.items():
            if hasattr(config, key):
                setattr(config, key, value)
        return config


@dataclass
class RecordingConfig:
    """Configuration for the background recorder."""

    # Nominal spacing between keyframes
    interval_ms: int = 200

    # How long stop_recording waits for the sampling thread
    join_timeout: float = 2.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "interval_ms": self.interval_ms,
            "join_timeout": self.join_timeout,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RecordingConfig":
        """Create from dictionary."""
        config = cls()
        for key, value in data.items():
            if hasattr(config, key):
                setattr(config, key, value)
        return config


@dataclass
class ExportConfig:
    """Configuration for motion data export."""

    # General
    default_format: ExportFormat = ExportFormat.XML
    output_directory: Path = field(default_factory=lambda: Path.home() / "kinemotion_exports")

    # XML settings
    xml_pretty_print: bool = True
    # Write pelvis pitch/yaw into the Pelvis <Position> Y/Z fields
    xml_legacy_pelvis: bool = True

    # JSON settings
    json_pretty_print: bool = True
    json_include_confidence: bool = True

    # CSV settings
    csv_delimiter: str = ","
    csv_include_header: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "default_format": self.default_format.value,
            "output_directory": str(self.output_directory),
            "xml_pretty_print": self.xml_pretty_print,
            "xml_legacy_pelvis": self.xml_legacy_pelvis,
            "json_pretty_print": self.json_pretty_print,
            "json_include_confidence": self.json_include_confidence,
            "csv_delimiter": self.csv_delimiter,
            "csv_include_header": self.csv_include_header,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExportConfig":
        """Create from dictionary."""
        config = cls()
        for key, value in data.items():
            if key == "default_format":
                value = ExportFormat(value)
            elif key == "output_directory":
                value = Path(value)
            if hasattr(config, key):
                setattr(config, key, value)
        return config


class Settings:
    """
    Main settings manager.

    Handles loading, saving, and managing all configuration options.
    """

    DEFAULT_CONFIG_PATH = Path.home() / ".kinemotion" / "config.yaml"

    def __init__(self, config_path: Optional[Path] = None, load: bool = True):
        """Initialize settings with optional custom config path."""
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH

        self.solver = SolverConfig()
        self.recording = RecordingConfig()
        self.export = ExportConfig()

        if load:
            self.load()

    def to_dict(self) -> dict:
        """Convert all sections to a dictionary."""
        return {
            "solver": self.solver.to_dict(),
            "recording": self.recording.to_dict(),
            "export": self.export.to_dict(),
        }

    def update_from_dict(self, data: dict):
        """Replace the sections present in a dictionary."""
        if "solver" in data:
            self.solver = SolverConfig.from_dict(data["solver"])
        if "recording" in data:
            self.recording = RecordingConfig.from_dict(data["recording"])
        if "export" in data:
            self.export = ExportConfig.from_dict(data["export"])

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file."""
        settings = cls(config_path=path, load=False)
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        settings.update_from_dict(data)
        return settings

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def load(self) -> bool:
        """Load settings from the config path. Returns True if successful."""
        if not self.config_path.exists():
            return False

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            self.update_from_dict(data)
            return True
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.warning(f"Could not load settings from {self.config_path}: {e}")
            return False

    def save(self) -> bool:
        """Save settings to the config path. Returns True if successful."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.to_yaml(self.config_path)
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self.config_path}: {e}")
            return False

    def reset_to_defaults(self):
        """Reset all settings to defaults."""
        self.solver = SolverConfig()
        self.recording = RecordingConfig()
        self.export = ExportConfig()
