"""
Error Definitions for cf-terraforming

This module defines the exception classes raised while fetching Cloudflare
resources and rendering them as Terraform configuration. Every error carries
a human readable message plus structured details for logging.
"""

from typing import Any, Dict, List, Optional


class CfTerraformingError(Exception):
    """Base exception class for all cf-terraforming errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class UnsupportedValueError(CfTerraformingError):
    """Raised when a value has a shape that cannot be written as HCL."""

    def __init__(self, value: Any, attribute: Optional[str] = None, **details):
        type_name = type(value).__name__
        if attribute:
            message = f"Cannot render attribute {attribute!r}: unsupported value of type {type_name}"
        else:
            message = f"Cannot render unsupported value of type {type_name}"

        super().__init__(message, {"value_type": type_name, **details})
        self.value = value
        self.attribute = attribute


class UnsupportedResourceTypeError(CfTerraformingError):
    """Raised when a resource type has no attribute table."""

    def __init__(self, resource_type: str, **details):
        message = f'"{resource_type}" is not yet supported for automatic generation'

        super().__init__(message, details)
        self.resource_type = resource_type


class ScopeError(CfTerraformingError):
    """Raised when the zone/account scope is missing or not valid for a type."""

    def __init__(self, resource_type: str, reason: str, scopes: Optional[List[str]] = None, **details):
        message = f"Invalid scope for {resource_type}: {reason}"

        super().__init__(message, {"resource_type": resource_type, "scopes": scopes or [], **details})
        self.resource_type = resource_type
        self.reason = reason
        self.scopes = scopes or []


class ConfigurationError(CfTerraformingError):
    """Raised when configuration or registry data is invalid or incomplete."""

    def __init__(self, field: str, value: Any, expected: str, **details):
        message = f"Invalid configuration for {field}: got {value}, expected {expected}"

        super().__init__(message, {"field": field, "value": value, "expected": expected, **details})
        self.field = field
        self.value = value
        self.expected = expected


class ApiError(CfTerraformingError):
    """Raised when the Cloudflare API returns an HTTP or envelope failure."""

    def __init__(
        self,
        path: str,
        status_code: Optional[int],
        errors: Optional[List[str]] = None,
        **details,
    ):
        errors = errors or []
        reason = "; ".join(errors) if errors else "request failed"
        if status_code is not None:
            message = f"Cloudflare API error on {path} (HTTP {status_code}): {reason}"
        else:
            message = f"Cloudflare API error on {path}: {reason}"

        super().__init__(message, details)
        self.path = path
        self.status_code = status_code
        self.errors = errors


def raise_configuration_error(field: str, value: Any, expected: str, **details):
    """Raise a configuration error with a hint for the common settings."""
    suggestions = {
        "api_token": "Set CLOUDFLARE_API_TOKEN or pass --token",
        "api_key": "Set CLOUDFLARE_EMAIL and CLOUDFLARE_API_KEY, or use an API token",
    }

    suggestion = suggestions.get(field.lower())
    if suggestion:
        details["suggestion"] = suggestion

    raise ConfigurationError(field, value, expected, **details)
