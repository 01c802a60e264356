"""
REST client for the content store.

This module handles communication with the store's REST API: filtered
lookups, paginated listing, and create/update writes wrapped in the
``{"data": ...}`` envelope. Every entry returned inward is normalized to a
StoreRecord, whatever response shape the store version uses.
"""

import httpx
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ..errors import RemoteError
from ..models import StoreRecord


class StoreClient:
    """
    Manages HTTP communication with the content store.
    """

    def __init__(self, base_url: str, token: str, timeout: float = 30.0,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the store client.

        Args:
            base_url: Store base URL, e.g. http://localhost:1337
            token: Bearer token sent with every request
            timeout: Transport timeout in seconds
            transport: Optional httpx transport (tests pass an httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
            },
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        self.client.close()

    def request(self, method: str, endpoint: str, params: Optional[Dict[str, str]] = None,
                data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send one request and decode the JSON response.

        Args:
            method: HTTP method
            endpoint: Path below the base URL, e.g. /api/pages
            params: Query parameters
            data: Payload to wrap in the ``data`` envelope

        Returns:
            The decoded response body

        Raises:
            RemoteError: On connection failures and non-success responses
        """
        body = {"data": data} if data is not None else None
        try:
            response = self.client.request(method, endpoint, params=params, json=body)
        except httpx.RequestError as e:
            raise RemoteError(f"Failed to reach content store: {e}")

        if response.is_error:
            raise RemoteError(
                f"{response.status_code} {response.reason_phrase} :: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(f"Invalid JSON from content store: {e}", status_code=response.status_code,
                              body=response.text)

    @staticmethod
    def _records(result: Dict[str, Any]) -> List[StoreRecord]:
        data = result.get("data") if isinstance(result, dict) else None
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            return []
        return [StoreRecord.from_entry(entry) for entry in data if isinstance(entry, dict)]

    def find_one(self, endpoint: str, field: str, value: str) -> Optional[StoreRecord]:
        """
        Look up an entry by an exact field match.

        Args:
            endpoint: Collection endpoint
            field: Field to filter on (routePath, slug, fromPath)
            value: Natural key value

        Returns:
            The first matching record, or None
        """
        params = {
            f"filters[{field}][$eq]": value,
            "pagination[pageSize]": "1",
        }
        records = self._records(self.request("GET", endpoint, params=params))
        return records[0] if records else None

    def list_page(self, endpoint: str, page: int, page_size: int,
                  filters: Optional[Dict[str, str]] = None,
                  populate: Optional[List[str]] = None) -> Tuple[List[StoreRecord], int]:
        """
        Fetch one page of a collection.

        Returns:
            The page's records and the total page count reported by the store
        """
        params = {
            "pagination[page]": str(page),
            "pagination[pageSize]": str(page_size),
        }
        for index, relation in enumerate(populate or []):
            params[f"populate[{index}]"] = relation
        for field, value in (filters or {}).items():
            params[f"filters[{field}][$eq]"] = value

        result = self.request("GET", endpoint, params=params)
        pagination = (result.get("meta") or {}).get("pagination") or {}
        try:
            page_count = int(pagination.get("pageCount", 1))
        except (TypeError, ValueError):
            page_count = 1
        return self._records(result), page_count

    def iter_all(self, endpoint: str, page_size: int = 100,
                 filters: Optional[Dict[str, str]] = None,
                 populate: Optional[List[str]] = None) -> Iterator[StoreRecord]:
        """
        Iterate over every entry of a collection, page by page.

        Pages are requested until the store's reported page count is reached.
        """
        page = 1
        page_count = 1
        while page <= page_count:
            records, page_count = self.list_page(endpoint, page, page_size, filters, populate)
            logging.debug(f"Fetched page {page}/{page_count} of {endpoint} ({len(records)} entries)")
            yield from records
            page += 1

    def create(self, endpoint: str, data: Dict[str, Any]) -> Optional[StoreRecord]:
        """Create an entry and return it as stored."""
        records = self._records(self.request("POST", endpoint, data=data))
        return records[0] if records else None

    def update(self, endpoint: str, entry_id: Union[int, str], data: Dict[str, Any]) -> Optional[StoreRecord]:
        """Update an entry by id or document id and return it as stored."""
        records = self._records(self.request("PUT", f"{endpoint}/{entry_id}", data=data))
        return records[0] if records else None
