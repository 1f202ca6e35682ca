"""
cf-terraforming - generate Terraform configuration from existing Cloudflare
resources.

The core is the HCL renderer in ``cf_terraforming.hcl``; the API client,
resource-type tables and CLI feed it.
"""

__version__ = "0.1.0"

from .errors import (  # noqa: E402
    ApiError,
    CfTerraformingError,
    ConfigurationError,
    ScopeError,
    UnsupportedResourceTypeError,
    UnsupportedValueError,
)
from .hcl import classify, render_attributes, write_attr_line  # noqa: E402

__all__ = [
    "__version__",
    "ApiError",
    "CfTerraformingError",
    "ConfigurationError",
    "ScopeError",
    "UnsupportedResourceTypeError",
    "UnsupportedValueError",
    "classify",
    "render_attributes",
    "write_attr_line",
]
