"""
Tests for the Supabase REST record store using httpx.MockTransport
"""

import json

import httpx
import pytest

from conftest import permit_record
from infrastructure.external.supabase_client import SupabaseRecordStore
from infrastructure.store import PERMITS, USERS, RecordStoreError


class Recorder:
    """Transport handler that records requests and replies with a canned response"""

    def __init__(self, status_code=200, payload=None):
        self.requests = []
        self.status_code = status_code
        self.payload = payload

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.payload is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.payload)


def make_store(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SupabaseRecordStore("https://demo.supabase.co/", "anon-key", client=client)


class TestSupabaseRecordStore:
    """Test request shape and error translation"""

    def test_requires_url_and_key(self):
        with pytest.raises(ValueError):
            SupabaseRecordStore("", "key")
        with pytest.raises(ValueError):
            SupabaseRecordStore("https://demo.supabase.co", "")

    def test_select_with_order(self):
        records = [permit_record(1)]
        handler = Recorder(payload=records)

        rows = make_store(handler).select(PERMITS, order_by="createdAt", descending=True)

        request = handler.requests[0]
        assert rows == records
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/permits"
        assert request.url.params["select"] == "*"
        assert request.url.params["order"] == "createdAt.desc"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"

    def test_select_without_order(self):
        handler = Recorder(payload=[])

        make_store(handler).select(USERS)

        assert "order" not in handler.requests[0].url.params

    def test_select_rejects_non_list_payload(self):
        with pytest.raises(RecordStoreError):
            make_store(Recorder(payload={"message": "oops"})).select(USERS)

    def test_insert_posts_list(self):
        handler = Recorder(status_code=201)
        record = permit_record(1)

        make_store(handler).insert(PERMITS, [record])

        request = handler.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == [record]

    def test_update_filters_by_id(self):
        handler = Recorder(status_code=204)

        make_store(handler).update(USERS, "user-1", {"name": "New Name"})

        request = handler.requests[0]
        assert request.method == "PATCH"
        assert request.url.params["id"] == "eq.user-1"
        assert json.loads(request.content) == {"name": "New Name"}

    def test_delete_filters_by_id(self):
        handler = Recorder(status_code=204)

        make_store(handler).delete(PERMITS, "permit-9")

        request = handler.requests[0]
        assert request.method == "DELETE"
        assert request.url.params["id"] == "eq.permit-9"

    def test_http_error_status(self):
        with pytest.raises(RecordStoreError) as exc_info:
            make_store(Recorder(status_code=401, payload={"message": "bad key"})).select(PERMITS)

        assert exc_info.value.status_code == 401
        assert exc_info.value.collection == PERMITS

    def test_transport_error(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RecordStoreError):
            make_store(unreachable).insert(PERMITS, [permit_record(1)])

    def test_unknown_collection_makes_no_request(self):
        handler = Recorder(payload=[])

        with pytest.raises(RecordStoreError):
            make_store(handler).select("vehicles")

        assert handler.requests == []
