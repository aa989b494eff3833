"""
Supabase (PostgREST) adapter for the registry record store.
Handles the REST calls against the hosted `permits` and `users` tables.
"""

from typing import Any, Dict, List, Optional

import httpx

from infrastructure.store.record_store import RecordStore, RecordStoreError
from utils.logging_config import get_logger


class SupabaseRecordStore(RecordStore):
    """
    Record store backed by a Supabase project's REST endpoint.

    Every call is a single request/response round trip. No retries are made
    here; a failure surfaces as RecordStoreError and the user resubmits.
    """

    def __init__(self, url: str, api_key: str, timeout: Optional[float] = None,
                 client: Optional[httpx.Client] = None):
        """
        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Anon or service key sent as both apikey and bearer token
            timeout: Request timeout in seconds, None waits indefinitely
            client: Preconfigured httpx client (used in tests)
        """
        if not url or not api_key:
            raise ValueError("Supabase URL and key must both be configured")

        self.logger = get_logger(__name__)
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    def _request(self, method: str, collection: str, **kwargs) -> httpx.Response:
        """Make one request and translate failures into RecordStoreError"""
        self._check_collection(collection)
        url = f"{self.base_url}/{collection}"

        try:
            if self._client is not None:
                response = self._client.request(
                    method, url, headers=self._headers(), timeout=self.timeout, **kwargs
                )
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            self.logger.error(f"Supabase {method} {collection} failed: {e}")
            raise RecordStoreError(f"Registry unreachable: {e}", collection=collection)

        if response.status_code >= 400:
            self.logger.error(
                f"Supabase {method} {collection} rejected: {response.status_code} {response.text}"
            )
            raise RecordStoreError(
                f"Registry rejected {method} on {collection}",
                collection=collection,
                status_code=response.status_code
            )

        return response

    def select(self, collection: str, order_by: Optional[str] = None,
               descending: bool = False) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"

        response = self._request("GET", collection, params=params)
        data = response.json()
        if not isinstance(data, list):
            raise RecordStoreError(f"Unexpected payload for {collection}", collection=collection)
        return data

    def insert(self, collection: str, records: List[Dict[str, Any]]) -> None:
        self._request("POST", collection, json=records)
        self.logger.debug(f"Inserted {len(records)} record(s) into {collection}")

    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        self._request("PATCH", collection, params={"id": f"eq.{record_id}"}, json=fields)

    def delete(self, collection: str, record_id: str) -> None:
        self._request("DELETE", collection, params={"id": f"eq.{record_id}"})
