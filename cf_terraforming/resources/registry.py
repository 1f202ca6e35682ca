"""Resource-type registry loaded from ``resource_types.yaml``.

The YAML file is the only place that knows which API field becomes which
Terraform attribute. It is parsed and validated once and cached.
"""

from collections.abc import Mapping
from functools import lru_cache
from importlib import resources as importlib_resources
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..errors import (
    ConfigurationError,
    ScopeError,
    UnsupportedResourceTypeError,
    UnsupportedValueError,
)
from ..logging import get_logger
from ..models import SCOPE_ID_ATTRIBUTE, ResourceRecord, ResourceTypeSpec
from .transforms import TRANSFORMS, apply_transforms

logger = get_logger(__name__)

_MISSING = object()


class ResourceRegistry:
    """Lookup table of ``ResourceTypeSpec`` keyed by Terraform type name."""

    def __init__(self, specs: Dict[str, ResourceTypeSpec]) -> None:
        self._specs = specs

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "ResourceRegistry":
        """Validate raw table data and resolve ``alias_of`` entries."""
        if not isinstance(raw, Mapping):
            raise ConfigurationError("resource_types", type(raw).__name__, "a mapping of type names")

        specs: Dict[str, ResourceTypeSpec] = {}
        aliases: Dict[str, str] = {}

        for name, body in raw.items():
            if body is not None and not isinstance(body, Mapping):
                raise ConfigurationError(name, body, "a mapping of table fields")
            body = dict(body or {})
            if "alias_of" in body:
                aliases[name] = body["alias_of"]
                continue
            try:
                spec = ResourceTypeSpec(resource_type=name, **body)
            except ValidationError as e:
                raise ConfigurationError(name, body, "a valid resource type table", error=str(e)) from e
            for mapping in spec.attributes:
                if mapping.transform:
                    unknown = [t for t in mapping.transform.split("|") if t.strip() not in TRANSFORMS]
                    if unknown:
                        raise ConfigurationError(
                            f"{name}.{mapping.name}.transform", mapping.transform, "known transforms"
                        )
            specs[name] = spec

        for alias, target in aliases.items():
            if target not in specs:
                raise ConfigurationError(f"{alias}.alias_of", target, "an existing resource type")
            specs[alias] = specs[target].model_copy(update={"resource_type": alias, "alias_of": target})

        for name, spec in specs.items():
            if not spec.parent:
                continue
            parent = specs.get(spec.parent)
            if parent is None:
                raise ConfigurationError(f"{name}.parent", spec.parent, "an existing resource type")
            if parent.parent or not set(spec.scopes) <= set(parent.scopes):
                raise ConfigurationError(
                    f"{name}.parent", spec.parent, "a top-level type covering the same scopes"
                )

        return cls(specs)

    @classmethod
    def from_yaml(cls, text: str) -> "ResourceRegistry":
        return cls.from_mapping(yaml.safe_load(text) or {})

    def __contains__(self, resource_type: str) -> bool:
        return resource_type in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def resource_types(self, scope: Optional[str] = None) -> List[str]:
        """Return the supported type names, optionally limited to one scope."""
        return sorted(
            name for name, spec in self._specs.items() if scope is None or scope in spec.scopes
        )

    def get(self, resource_type: str) -> ResourceTypeSpec:
        try:
            return self._specs[resource_type]
        except KeyError:
            raise UnsupportedResourceTypeError(resource_type) from None

    def resolve_scope(
        self, resource_type: str, zone_id: Optional[str], account_id: Optional[str]
    ) -> Tuple[str, str]:
        """Pick the scope to query for *resource_type*.

        A zone id wins over an account id when the type supports zones.
        """
        spec = self.get(resource_type)
        if not zone_id and not account_id:
            raise ScopeError(resource_type, "--zone or --account must be set", spec.scopes)
        if zone_id and "zone" in spec.scopes:
            return "zone", zone_id
        if account_id and "account" in spec.scopes:
            return "account", account_id
        given = "zone" if zone_id else "account"
        raise ScopeError(resource_type, f"{given} scope is not supported", spec.scopes)


def lookup_path(data: Any, path: List[str]) -> Any:
    """Follow a dotted field path through nested dicts and lists.

    Returns ``None`` as soon as a segment is missing.
    """
    current = data
    for segment in path:
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else _MISSING
        else:
            return None
        if current is _MISSING:
            return None
    return current


def extract_attributes(spec: ResourceTypeSpec, record: ResourceRecord) -> List[Tuple[str, Any]]:
    """Build the ordered ``(name, value)`` attributes for one record.

    The scope identifier comes first, then the parent identifier for
    dependent types, then every table row in declaration order. Absent
    values are kept so the renderer can drop them.
    """
    attributes: List[Tuple[str, Any]] = [(SCOPE_ID_ATTRIBUTE[record.scope], record.scope_id)]
    if spec.parent_attribute:
        attributes.append((spec.parent_attribute, record.parent_id))
    for mapping in spec.attributes:
        value = lookup_path(record.data, mapping.path)
        if mapping.transform:
            try:
                value = apply_transforms(mapping.transform, value)
            except UnsupportedValueError as e:
                raise UnsupportedValueError(e.value, attribute=mapping.name, **e.details) from e
        attributes.append((mapping.name, value))
    return attributes


def import_id_for(spec: ResourceTypeSpec, record: ResourceRecord) -> str:
    """Format the ``terraform import`` identifier for *record*."""
    values = {
        "scope": record.scope,
        "scope_id": record.scope_id,
        "id": record.resource_id,
        SCOPE_ID_ATTRIBUTE[record.scope]: record.scope_id,
    }
    if record.parent_id is not None:
        values["parent_id"] = record.parent_id
    try:
        return spec.import_id.format(**values)
    except KeyError as e:
        raise ConfigurationError(
            f"{spec.resource_type}.import_id", spec.import_id, f"placeholders available for {record.scope} scope"
        ) from e


@lru_cache(maxsize=1)
def get_registry() -> ResourceRegistry:
    """Load the bundled registry once per process."""
    text = (
        importlib_resources.files("cf_terraforming.resources")
        .joinpath("resource_types.yaml")
        .read_text(encoding="utf-8")
    )
    registry = ResourceRegistry.from_yaml(text)
    logger.debug("resource registry loaded", resource_types=len(registry))
    return registry
