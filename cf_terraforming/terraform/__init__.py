"""Terraform output: resource blocks and import instructions."""

from .generator import ResourceFetcher, TerraformGenerator
from .importer import ImportScriptGenerator

__all__ = ["ImportScriptGenerator", "ResourceFetcher", "TerraformGenerator"]
