from ytt.output.destination import OutputDestination, resolve_destination, sanitize_filename
from ytt.output.formatters import extension_for, format_srt_time, normalize_format, render
from ytt.output.writer import write_output

__all__ = [
    "OutputDestination",
    "resolve_destination",
    "sanitize_filename",
    "extension_for",
    "format_srt_time",
    "normalize_format",
    "render",
    "write_output",
]
