"""HCL value classification and block rendering."""

from .values import ValueKind, classify, format_number, format_scalar, quote_string
from .writer import (
    render_attributes,
    render_import_block,
    render_resource_block,
    write_attr_line,
)

__all__ = [
    "ValueKind",
    "classify",
    "format_number",
    "format_scalar",
    "quote_string",
    "render_attributes",
    "render_import_block",
    "render_resource_block",
    "write_attr_line",
]
