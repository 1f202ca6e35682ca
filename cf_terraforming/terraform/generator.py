"""Fetch Cloudflare resources and render them as Terraform resource blocks.

Records are fetched serially (pagination is inherently ordered) and rendered
on a thread pool. ``ThreadPoolExecutor.map`` yields results in submission
order, so the output order always matches the order the API returned the
records in.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

from ..client import CloudflareClient
from ..hcl import render_resource_block
from ..logging import get_logger, trace_operation
from ..models import SCOPE_ID_ATTRIBUTE, GenerationResult, ResourceRecord, ResourceTypeSpec
from ..resources import ResourceRegistry, extract_attributes, get_registry

logger = get_logger(__name__)


class ResourceFetcher:
    """Turn API responses into ``ResourceRecord`` objects for one type."""

    def __init__(self, client: CloudflareClient, registry: Optional[ResourceRegistry] = None) -> None:
        self.client = client
        self.registry = registry or get_registry()

    @trace_operation("fetch_resources")
    def fetch(
        self,
        resource_type: str,
        zone_id: Optional[str] = None,
        account_id: Optional[str] = None,
        resource_id: Optional[str] = None,
    ) -> List[ResourceRecord]:
        """Fetch every instance of *resource_type* in the chosen scope.

        With *resource_id* only that instance is fetched. Singleton types
        (settings-like endpoints) always yield exactly one record whose id is
        the scope id, and ignore *resource_id*. Dependent types are fetched
        once per record of their parent type; for them *resource_id* names
        the parent to fetch under.
        """
        spec = self.registry.get(resource_type)
        scope, scope_id = self.registry.resolve_scope(resource_type, zone_id, account_id)

        if spec.parent:
            if resource_id:
                parent_ids = [resource_id]
            else:
                parents = self.fetch(spec.parent, **{SCOPE_ID_ATTRIBUTE[scope]: scope_id})
                parent_ids = [p.resource_id for p in parents]
            batches = [
                (pid, self._fetch_items(spec, spec.endpoint_for(scope, scope_id, pid), None))
                for pid in parent_ids
            ]
        else:
            if spec.singleton and resource_id:
                logger.warning(
                    "ignoring resource id for singleton resource type",
                    resource_type=resource_type,
                    resource_id=resource_id,
                )
                resource_id = None
            batches = [(None, self._fetch_items(spec, spec.endpoint_for(scope, scope_id), resource_id))]

        records: List[ResourceRecord] = []
        for parent_id, items in batches:
            for item in items:
                if not isinstance(item, dict):
                    logger.warning("skipping non-object API result", resource_type=resource_type)
                    continue
                if spec.singleton:
                    rid = parent_id or scope_id
                else:
                    rid = item.get(spec.id_field)
                if rid is None or rid == "":
                    logger.warning(
                        "skipping record without identifier",
                        resource_type=resource_type,
                        id_field=spec.id_field,
                    )
                    continue
                records.append(
                    ResourceRecord(
                        resource_type=resource_type,
                        resource_id=str(rid),
                        scope=scope,
                        scope_id=scope_id,
                        parent_id=parent_id,
                        data=item,
                    )
                )

        logger.info(
            "fetched resources",
            resource_type=resource_type,
            scope=scope,
            count=len(records),
        )
        return records

    def _fetch_items(
        self, spec: ResourceTypeSpec, path: str, resource_id: Optional[str]
    ) -> List[Any]:
        if spec.singleton:
            result = self.client.get(path)
            if spec.wrap_result and not isinstance(result, dict):
                result = {spec.wrap_result: result}
            return [result]

        if resource_id:
            return [self.client.get(_member_path(path, resource_id))]

        items = self.client.list(path, spec.pagination, result_key=spec.result_key)
        if not spec.fetch_details:
            return items
        return [
            self.client.get(_member_path(path, str(item[spec.id_field])))
            if isinstance(item, dict) and item.get(spec.id_field)
            else item
            for item in items
        ]


def _member_path(collection: str, member_id: str) -> str:
    base, sep, query = collection.partition("?")
    return f"{base}/{member_id}{sep}{query}"


class TerraformGenerator:
    """Render fetched records as HCL ``resource`` blocks.

    Parameters
    ----------
    registry:
        Resource-type tables; defaults to the bundled registry.
    max_workers:
        Size of the rendering thread pool.
    """

    def __init__(self, registry: Optional[ResourceRegistry] = None, max_workers: int = 4) -> None:
        self.registry = registry or get_registry()
        self.max_workers = max(1, max_workers)

    def render_record(self, record: ResourceRecord) -> str:
        spec = self.registry.get(record.resource_type)
        attributes = extract_attributes(spec, record)
        return render_resource_block(record.resource_type, record.terraform_name, attributes)

    def render(self, records: List[ResourceRecord]) -> str:
        """Render *records* in order, separated by blank lines."""
        if not records:
            return ""
        if self.max_workers == 1 or len(records) == 1:
            blocks = [self.render_record(r) for r in records]
        else:
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="cf-render"
            ) as pool:
                blocks = list(pool.map(self.render_record, records))
        return "\n".join(blocks)

    def generate(self, fetcher: ResourceFetcher, resource_type: str, **scope) -> GenerationResult:
        """Fetch and render one resource type.

        ``scope`` takes the ``zone_id``, ``account_id`` and ``resource_id``
        keywords of ``ResourceFetcher.fetch``.
        """
        records = fetcher.fetch(resource_type, **scope)
        chosen_scope, scope_id = self.registry.resolve_scope(
            resource_type, scope.get("zone_id"), scope.get("account_id")
        )

        return GenerationResult(
            resource_type=resource_type,
            scope=chosen_scope,
            scope_id=scope_id,
            resource_count=len(records),
            content=self.render(records),
        )
