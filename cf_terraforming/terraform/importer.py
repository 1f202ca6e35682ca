"""Produce import instructions for generated resources.

Two output styles are supported: ``terraform import`` shell commands, and the
``import {}`` blocks understood by Terraform 1.5 and later.
"""

from typing import List, Optional

from ..hcl import render_import_block
from ..models import ResourceRecord
from ..resources import ResourceRegistry, get_registry, import_id_for


class ImportScriptGenerator:
    """Build import commands or blocks for a list of records."""

    def __init__(self, registry: Optional[ResourceRegistry] = None) -> None:
        self.registry = registry or get_registry()

    def import_id(self, record: ResourceRecord) -> str:
        return import_id_for(self.registry.get(record.resource_type), record)

    def commands(self, records: List[ResourceRecord]) -> str:
        """One ``terraform import <address> <id>`` line per record."""
        return "".join(
            f"terraform import {r.terraform_address} {self.import_id(r)}\n" for r in records
        )

    def blocks(self, records: List[ResourceRecord]) -> str:
        """One ``import { to = ... id = ... }`` block per record."""
        return "\n".join(render_import_block(r.terraform_address, self.import_id(r)) for r in records)

    def generate(self, records: List[ResourceRecord], modern: bool = False) -> str:
        return self.blocks(records) if modern else self.commands(records)
