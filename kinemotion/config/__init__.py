"""Configuration module for kinemotion."""

from kinemotion.config.settings import (
    Settings,
    SolverConfig,
    RecordingConfig,
    ExportConfig,
    ExportFormat,
)

__all__ = ["Settings", "SolverConfig", "RecordingConfig", "ExportConfig", "ExportFormat"]
