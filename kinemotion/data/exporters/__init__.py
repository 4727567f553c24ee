"""
Export modules for motion clips.

Supports:
- XML interchange format (read and write)
- JSON - Human-readable data exchange
- CSV - Spreadsheet compatible format
"""

from kinemotion.data.exporters.xml_codec import (
    InterchangeCodec,
    to_interchange_tree,
    from_interchange_tree,
)
from kinemotion.data.exporters.json_exporter import JSONExporter, import_json
from kinemotion.data.exporters.csv_exporter import CSVExporter

__all__ = [
    "InterchangeCodec",
    "to_interchange_tree",
    "from_interchange_tree",
    "JSONExporter",
    "import_json",
    "CSVExporter",
]
