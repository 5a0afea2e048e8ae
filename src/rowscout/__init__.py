"""rowscout: find the table inside nested JSON results and export it."""

from rowscout.config import CsvOptions, SearchOptions, Settings
from rowscout.csv_format import convert_array_to_csv, convert_to_csv
from rowscout.discovery import find_exportable_rows
from rowscout.export import export_payload, format_payload, format_rows
from rowscout.models import ConversionResult, ExportableRows

__all__ = [
    "ConversionResult",
    "CsvOptions",
    "ExportableRows",
    "SearchOptions",
    "Settings",
    "convert_array_to_csv",
    "convert_to_csv",
    "export_payload",
    "find_exportable_rows",
    "format_payload",
    "format_rows",
]
