"""Pydantic models for resource-type tables and fetched Cloudflare records."""

import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Scope = Literal["zone", "account"]

SCOPE_ID_ATTRIBUTE: Dict[str, str] = {
    "zone": "zone_id",
    "account": "account_id",
}

RESOURCE_NAME_PREFIX = "terraform_managed_resource"

PARENT_PLACEHOLDER = "{parent_id}"

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_-]")


class AttributeMapping(BaseModel):
    """One row of a resource type's table: API field path -> HCL attribute."""

    model_config = ConfigDict(extra="forbid")

    field: str
    name: str
    transform: Optional[str] = None

    @property
    def path(self) -> List[str]:
        return self.field.split(".")


class ResourceTypeSpec(BaseModel):
    """How to fetch and render one Terraform resource type."""

    model_config = ConfigDict(extra="forbid")

    resource_type: str
    endpoints: Dict[Scope, str]
    singleton: bool = False
    pagination: Literal["page", "cursor", "none"] = "page"
    result_key: Optional[str] = None
    id_field: str = "id"
    import_id: str = "{scope_id}/{id}"
    attributes: List[AttributeMapping] = Field(default_factory=list)
    alias_of: Optional[str] = None
    # Dependent types are fetched once per record of the parent type.
    parent: Optional[str] = None
    parent_attribute: Optional[str] = None
    # Listed items are summaries; fetch each one from <endpoint>/<id>.
    fetch_details: bool = False
    # A singleton whose result is not an object is stored under this key.
    wrap_result: Optional[str] = None

    @model_validator(mode="after")
    def _check_endpoints(self):
        if not self.endpoints:
            raise ValueError(f"{self.resource_type} declares no endpoints")
        for scope, endpoint in self.endpoints.items():
            placeholder = "{" + SCOPE_ID_ATTRIBUTE[scope] + "}"
            if placeholder not in endpoint:
                raise ValueError(
                    f"{self.resource_type} endpoint for {scope} must contain {placeholder}"
                )
            if bool(self.parent) != (PARENT_PLACEHOLDER in endpoint):
                raise ValueError(
                    f"{self.resource_type} endpoint for {scope} must contain {PARENT_PLACEHOLDER} "
                    "exactly when a parent is declared"
                )
        if self.parent_attribute and not self.parent:
            raise ValueError(f"{self.resource_type} sets parent_attribute without a parent")
        return self

    @property
    def scopes(self) -> List[str]:
        return list(self.endpoints)

    def endpoint_for(self, scope: str, scope_id: str, parent_id: Optional[str] = None) -> str:
        values = {SCOPE_ID_ATTRIBUTE[scope]: scope_id}
        if self.parent:
            values["parent_id"] = parent_id
        return self.endpoints[scope].format(**values)


class ResourceRecord(BaseModel):
    """A single resource instance returned by the Cloudflare API."""

    resource_type: str
    resource_id: str
    scope: Scope
    scope_id: str
    parent_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def terraform_name(self) -> str:
        safe_id = _NON_IDENTIFIER_RE.sub("_", self.resource_id)
        return f"{RESOURCE_NAME_PREFIX}_{safe_id}"

    @property
    def terraform_address(self) -> str:
        return f"{self.resource_type}.{self.terraform_name}"


class GenerationResult(BaseModel):
    """Rendered output for one resource type."""

    resource_type: str
    scope: Scope
    scope_id: str
    resource_count: int
    content: str
