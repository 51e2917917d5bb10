"""Report layer — YAML documents in, HTML/JSON reports out."""
from .loader import extract_raw_exhibit, load_document, load_file
from .renderer import build_payload, default_report_name, render_html

__all__ = [
    "extract_raw_exhibit",
    "load_document",
    "load_file",
    "build_payload",
    "default_report_name",
    "render_html",
]
