"""Thin Cloudflare v4 REST client built on httpx.

Only read calls are needed: ``get`` returns the ``result`` of one request and
``list`` walks every page of a collection. Connection-level retries come from
the httpx transport; the client adds no retry policy of its own.
"""

from typing import Any, Dict, List, Optional

import httpx

from . import __version__
from .config import Settings
from .errors import ApiError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_PER_PAGE = 50


class CloudflareClient:
    """Authenticated, paginating reader for the Cloudflare API.

    Parameters
    ----------
    settings:
        Credentials, hostname and transport options.
    transport:
        Optional httpx transport; tests pass an ``httpx.MockTransport``.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> None:
        settings.require_credentials()
        self.settings = settings
        self._client = httpx.Client(
            base_url=settings.api_base_url,
            headers=self._auth_headers(settings),
            timeout=settings.timeout_seconds,
            transport=transport or httpx.HTTPTransport(retries=settings.max_retries),
        )

    @staticmethod
    def _auth_headers(settings: Settings) -> Dict[str, str]:
        headers = {
            "User-Agent": f"cf-terraforming/{__version__}",
            "Accept": "application/json",
        }
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        else:
            headers["X-Auth-Email"] = settings.email or ""
            headers["X-Auth-Key"] = settings.api_key or ""
        if settings.api_user_service_key:
            headers["X-Auth-User-Service-Key"] = settings.api_user_service_key
        return headers

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "CloudflareClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET *path* and return the decoded v4 envelope."""
        path, _, query = path.partition("?")
        merged = httpx.QueryParams(query).merge(params or {})

        try:
            response = self._client.get(path, params=merged)
        except httpx.HTTPError as e:
            raise ApiError(path, None, [str(e)]) from e

        try:
            envelope = response.json()
        except ValueError:
            envelope = {}
        if not isinstance(envelope, dict):
            envelope = {}

        if response.is_error or not envelope.get("success", False):
            raise ApiError(
                path,
                response.status_code,
                self._error_messages(envelope),
            )

        return envelope

    @staticmethod
    def _error_messages(envelope: Dict[str, Any]) -> List[str]:
        messages = []
        for err in envelope.get("errors") or []:
            if isinstance(err, dict):
                code = err.get("code")
                text = err.get("message", "")
                messages.append(f"{code}: {text}" if code is not None else text)
            else:
                messages.append(str(err))
        return messages

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Return the ``result`` of a single GET."""
        return self._request(path, params).get("result")

    def list(
        self,
        path: str,
        pagination: str = "page",
        params: Optional[Dict[str, Any]] = None,
        result_key: Optional[str] = None,
    ) -> List[Any]:
        """Return every item of a collection, following pagination.

        ``page`` mode increments ``page`` until ``result_info.total_pages``;
        ``cursor`` mode follows ``result_info.cursor`` until it is empty or
        repeats; ``none`` issues a single request. A non-list ``result`` is
        wrapped in a one-element list. When *result_key* is set and ``result`` is an
        object, the items are read from that key instead.
        """
        params = dict(params or {})
        items: List[Any] = []

        if pagination == "page":
            params.setdefault("per_page", DEFAULT_PER_PAGE)
            page = 1
            while True:
                envelope = self._request(path, {**params, "page": page})
                items.extend(self._as_list(envelope.get("result"), result_key))
                total_pages = (envelope.get("result_info") or {}).get("total_pages") or 1
                if page >= total_pages:
                    break
                page += 1

        elif pagination == "cursor":
            cursor = None
            while True:
                request_params = dict(params)
                if cursor:
                    request_params["cursor"] = cursor
                envelope = self._request(path, request_params)
                items.extend(self._as_list(envelope.get("result"), result_key))
                next_cursor = (envelope.get("result_info") or {}).get("cursor")
                if not next_cursor:
                    break
                if next_cursor == cursor:
                    logger.warning("cursor did not advance, stopping pagination", path=path, cursor=cursor)
                    break
                cursor = next_cursor

        else:
            envelope = self._request(path, params)
            items.extend(self._as_list(envelope.get("result"), result_key))

        logger.debug("listed collection", path=path, items=len(items), pagination=pagination)
        return items

    @staticmethod
    def _as_list(result: Any, result_key: Optional[str] = None) -> List[Any]:
        if result_key and isinstance(result, dict):
            result = result.get(result_key)
        if result is None:
            return []
        if isinstance(result, list):
            return result
        return [result]
