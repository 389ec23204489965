"""Command-line reporting for the publishing pipeline."""

from .formatters import format_error_message, format_json_summary, format_record, format_upload_summary

__all__ = [
    "format_upload_summary",
    "format_json_summary",
    "format_record",
    "format_error_message",
]
