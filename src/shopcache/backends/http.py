"""HTTP backend for the hosted storefront API."""

from __future__ import annotations

import logging
from typing import Any, cast

import httpx

from shopcache.backends.base import TaxonomyKind
from shopcache.errors import (
    AuthorizationError,
    ConflictError,
    FetchError,
    NotFoundError,
    RequestError,
    ShapeError,
    StoreError,
)

logger = logging.getLogger(__name__)


def _query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Drop unset params and render booleans the way the API expects."""
    clean: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        clean[key] = ("true" if value else "false") if isinstance(value, bool) else value
    return clean


def _error_for(response: httpx.Response) -> StoreError:
    """Map a non-2xx response to a typed error carrying the server message."""
    status = response.status_code
    try:
        message = response.json().get("error") or "Request failed"
    except Exception:
        message = f"HTTP {status}"

    if status in (401, 403):
        return AuthorizationError(message, status=status)
    if status == 404:
        return NotFoundError(message, status=status)
    if status == 409 or (status == 400 and "already exists" in message.lower()):
        return ConflictError(message, status=status)
    if 400 <= status < 500:
        return RequestError(message, status=status)
    return FetchError(message, status=status)


class HttpBackend:
    """Async httpx client for every storefront endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object."""
        try:
            response = await self._client.request(
                method,
                path,
                params=_query_params(params) if params else None,
                json=body,
            )
        except httpx.TimeoutException as exc:
            raise FetchError(f"Request timed out: {method} {path}") from exc
        except httpx.TransportError as exc:
            raise FetchError(f"Network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"HTTP error: {exc}") from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if not response.is_success:
            raise _error_for(response)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise ShapeError(f"Invalid JSON from {method} {path}") from exc
        if not isinstance(data, dict):
            raise ShapeError(f"Expected a JSON object from {method} {path}")
        return cast(dict[str, Any], data)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def list_products(
        self,
        *,
        category: str | None = None,
        featured: bool | None = None,
        active: bool = True,
    ) -> dict[str, Any]:
        return await self._request(
            "GET",
            "/products",
            params={"category": category, "featured": featured, "active": active},
        )

    # -------------------------------------------------------------------------
    # Profile-scoped
    # -------------------------------------------------------------------------

    async def count_orders(self, user_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", "/orders/count", params={"user_id": user_id}
        )

    async def list_orders(
        self, user_id: str, *, offset: int, limit: int
    ) -> dict[str, Any]:
        return await self._request(
            "GET",
            "/orders",
            params={"user_id": user_id, "offset": offset, "limit": limit},
        )

    async def cancel_order(self, order_id: str, user_id: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/orders/{order_id}/cancel", body={"user_id": user_id}
        )

    async def list_addresses(self, user_id: str) -> dict[str, Any]:
        return await self._request("GET", "/addresses", params={"user_id": user_id})

    async def create_address(
        self, user_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "POST", "/addresses", body={**data, "user_id": user_id}
        )

    async def update_address(
        self, user_id: str, address_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            f"/addresses/{address_id}",
            params={"user_id": user_id},
            body=changes,
        )

    async def delete_address(self, user_id: str, address_id: str) -> None:
        await self._request(
            "DELETE", f"/addresses/{address_id}", params={"user_id": user_id}
        )

    async def get_profile(self, user_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/profiles/{user_id}")

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    async def list_admin_orders(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self._request("GET", "/admin/orders", params=params)

    async def get_order(self, order_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/admin/orders/{order_id}")

    async def update_order(
        self, order_id: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("PATCH", f"/admin/orders/{order_id}", body=changes)

    async def dashboard_stats(self) -> dict[str, Any]:
        return await self._request("GET", "/admin/stats")

    async def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/products", body=data)

    async def update_product(
        self, product_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("PATCH", f"/products/{product_id}", body=changes)

    async def delete_product(self, product_id: Any) -> None:
        await self._request("DELETE", f"/products/{product_id}")

    async def list_taxonomy(self, kind: TaxonomyKind) -> dict[str, Any]:
        return await self._request("GET", f"/{kind}")

    async def create_taxonomy(
        self, kind: TaxonomyKind, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("POST", f"/{kind}", body=data)

    async def update_taxonomy(
        self, kind: TaxonomyKind, item_id: Any, changes: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request("PATCH", f"/{kind}/{item_id}", body=changes)

    async def delete_taxonomy(self, kind: TaxonomyKind, item_id: Any) -> None:
        await self._request("DELETE", f"/{kind}/{item_id}")

    async def list_users(self) -> dict[str, Any]:
        return await self._request("GET", "/admin/users")

    async def update_user_role(self, user_id: str, role: str) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"/admin/users/{user_id}", body={"role": role}
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
