"""Static resource-type tables and the transforms they reference."""

from .registry import (
    ResourceRegistry,
    extract_attributes,
    get_registry,
    import_id_for,
    lookup_path,
)
from .transforms import TRANSFORMS, apply_transforms

__all__ = [
    "ResourceRegistry",
    "TRANSFORMS",
    "apply_transforms",
    "extract_attributes",
    "get_registry",
    "import_id_for",
    "lookup_path",
]
