"""Async HTTP client for the ERP REST backend."""
from typing import Any, Optional

import ssl

import certifi
import httpx

from app.core.config import settings
from app.schemas.backend_schema import PageResponse
from app.schemas.common import RequestDomain


LIST_PATHS = {
    RequestDomain.leave: "/leaves/list",
    RequestDomain.loan: "/loans/list",
    RequestDomain.labor: "/labor/requests",
}

DETAIL_PATHS = {
    RequestDomain.leave: "/leaves/{id}",
    RequestDomain.loan: "/loans/{id}",
    RequestDomain.labor: "/labor/requests/{id}",
}

# Labor requests have no per-level history endpoint
TIMELINE_PATHS = {
    RequestDomain.leave: "/leaves/{id}/timeline",
    RequestDomain.loan: "/loans/{id}/timeline",
}


class ErpApiError(Exception):
    def __init__(
        self,
        message: str,
        status: int,
        errors: Optional[dict[str, list[str]]] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or {}
        self.data = data


def _errors_from(body: dict) -> dict[str, list[str]]:
    if isinstance(body.get("errors"), dict):
        return body["errors"]
    data = body.get("data")
    if isinstance(data, dict):
        # validation failures come back as {"field": "message"}
        return {k: [str(v)] for k, v in data.items()}
    return {}


class ErpApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.ERP_API_BASE_URL).rstrip("/")
        kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "timeout": timeout if timeout is not None else settings.ERP_API_TIMEOUT,
            "headers": {"Accept": "application/json; charset=UTF-8"},
        }
        if transport is not None:
            kwargs["transport"] = transport
        else:
            kwargs["verify"] = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(**kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, endpoint: str, token: Optional[str] = None, params: Optional[dict] = None) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        query = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.get(endpoint, params=query, headers=headers)
        except httpx.HTTPError as exc:
            raise ErpApiError(f"Failed to connect to ERP backend at {self.base_url}: {exc}", 0) from exc

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise ErpApiError(
                f"Non-JSON response from {endpoint}. Status: {response.status_code}",
                response.status_code,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ErpApiError(
                f"Invalid JSON response from {endpoint}. Status: {response.status_code}",
                response.status_code,
            ) from exc

        if response.is_error:
            detail = body if isinstance(body, dict) else {}
            raise ErpApiError(
                detail.get("message") or f"HTTP {response.status_code}",
                response.status_code,
                _errors_from(detail),
                detail.get("data"),
            )

        if isinstance(body, dict) and "success" in body:
            return body.get("data")
        return body

    async def list_requests(
        self,
        domain: RequestDomain,
        token: Optional[str] = None,
        page: int = 1,
        size: int = 20,
        employee_no: Optional[int] = None,
    ) -> PageResponse[dict]:
        if domain == RequestDomain.labor:
            data = await self.get(LIST_PATHS[domain], token)
            items = [i for i in (data or []) if isinstance(i, dict)]
            if employee_no is not None:
                items = [i for i in items if i.get("requestedBy") == employee_no]
            start = (page - 1) * size
            return PageResponse[dict](
                content=items[start:start + size],
                total_elements=len(items),
                total_pages=(len(items) + size - 1) // size,
                size=size,
                number=page - 1,
            )
        # backend pages are zero-based
        data = await self.get(
            LIST_PATHS[domain],
            token,
            params={"page": page - 1, "size": size, "employeeNo": employee_no},
        )
        if isinstance(data, list):
            return PageResponse[dict](content=data, total_elements=len(data), size=size, number=page - 1)
        return PageResponse[dict].model_validate(data or {})

    async def get_request(self, domain: RequestDomain, request_id: int, token: Optional[str] = None) -> dict:
        data = await self.get(DETAIL_PATHS[domain].format(id=request_id), token)
        if not isinstance(data, dict):
            raise ErpApiError(f"Unexpected payload for {domain.value} request {request_id}", 502)
        return data

    async def get_timeline(self, domain: RequestDomain, request_id: int, token: Optional[str] = None) -> list[dict]:
        path = TIMELINE_PATHS.get(domain)
        if path is None:
            return []
        data = await self.get(path.format(id=request_id), token)
        return data if isinstance(data, list) else []


_erp_client: Optional[ErpApiClient] = None


def get_erp_client() -> ErpApiClient:
    global _erp_client
    if _erp_client is None:
        _erp_client = ErpApiClient()
    return _erp_client


async def close_erp_client() -> None:
    global _erp_client
    if _erp_client is not None:
        await _erp_client.aclose()
        _erp_client = None
