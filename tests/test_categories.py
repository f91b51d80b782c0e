import json
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest

from ecwidkit.categories import (
    CategoriesService,
    Category,
    SearchOptions,
    SearchResult,
)
from ecwidkit.client import APIError, Requester


@dataclass
class _Recorded:
    method: str
    path: str
    query: dict
    body: bytes


@dataclass
class _ServerState:
    url: str = ""
    status: int = 200
    payload: bytes = b"{}"
    requests: list = field(default_factory=list)


@pytest.fixture
def server():
    state = _ServerState()

    class Handler(BaseHTTPRequestHandler):
        def _handle(self):
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            parsed = urlsplit(self.path)
            state.requests.append(
                _Recorded(self.command, parsed.path, parse_qs(parsed.query), body)
            )
            self.send_response(state.status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(state.payload)))
            self.end_headers()
            self.wfile.write(state.payload)

        do_GET = do_POST = do_PUT = do_DELETE = _handle

        def log_message(self, *args):
            pass

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    state.url = f"http://127.0.0.1:{httpd.server_address[1]}"
    yield state
    httpd.shutdown()
    httpd.server_close()


def _service(server):
    return CategoriesService(
        Requester(base_url=server.url + "/api/v3", store_id="12345", token="secret")
    )


def test_search(server):
    server.payload = (
        b'{"total":1,"count":1,"offset":0,"limit":100,'
        b'"items":[{"id":42,"name":"Shoes"}]}'
    )
    result = _service(server).search(SearchOptions(parent=10))
    assert server.requests[0].path == "/api/v3/12345/categories"
    assert server.requests[0].query["parent"] == ["10"]
    assert result.total == 1
    assert result.items[0].name == "Shoes"


def test_search_hidden_categories(server):
    server.payload = b'{"total":0,"count":0,"offset":0,"limit":100,"items":[]}'
    result = _service(server).search(SearchOptions(hidden_categories=True))
    assert server.requests[0].query["hidden_categories"] == ["true"]
    assert result.items == []


def test_get(server):
    server.payload = b'{"id":42,"name":"Shoes","productCount":5}'
    cat = _service(server).get(42)
    assert server.requests[0].path == "/api/v3/12345/categories/42"
    assert cat.name == "Shoes"
    assert cat.product_count == 5


def test_get_zero_id(server):
    with pytest.raises(ValueError):
        _service(server).get(0)
    assert server.requests == []


def test_create(server):
    server.payload = b'{"id":99}'
    result = _service(server).create(Category(name="New Cat"))
    assert server.requests[0].method == "POST"
    assert json.loads(server.requests[0].body)["name"] == "New Cat"
    assert result.id == 99


def test_update(server):
    server.payload = b'{"updateCount":1}'
    result = _service(server).update(42, Category(name="Updated"))
    assert server.requests[0].method == "PUT"
    assert server.requests[0].path == "/api/v3/12345/categories/42"
    assert result.update_count == 1


def test_update_zero_id(server):
    with pytest.raises(ValueError):
        _service(server).update(0, Category(name="X"))
    assert server.requests == []


def test_delete(server):
    server.payload = b'{"deleteCount":1}'
    result = _service(server).delete(42)
    assert server.requests[0].method == "DELETE"
    assert server.requests[0].path == "/api/v3/12345/categories/42"
    assert result.delete_count == 1


def test_get_product_order(server):
    server.payload = b'{"sortedIds":[689454040,692730761,724894174]}'
    result = _service(server).get_product_order(42)
    assert server.requests[0].path == "/api/v3/12345/products/sort"
    assert server.requests[0].query["parentCategory"] == ["42"]
    assert result.sorted_ids == [689454040, 692730761, 724894174]


def test_search_error(server):
    server.status = 401
    server.payload = b'{"errorMessage":"unauthorized","errorCode":"401"}'
    with pytest.raises(APIError) as info:
        _service(server).search(None)
    assert info.value.status_code == 401


def test_search_options_empty_query():
    assert SearchOptions().to_query() == {}


def test_search_options_false_flags_are_omitted():
    opts = SearchOptions(with_subcategories=False, hidden_categories=False)
    assert opts.to_query() == {}


def test_category_to_dict_omits_empty_fields():
    assert Category(name="Shoes").to_dict() == {"id": 0, "name": "Shoes"}


def test_category_to_dict_keeps_explicit_false_enabled():
    assert Category(enabled=False).to_dict() == {"id": 0, "enabled": False}


def test_category_round_trip():
    cat = Category(
        id=42,
        parent_id=10,
        name="Shoes",
        enabled=True,
        product_ids=[1, 2],
        name_translated={"en": "Shoes"},
    )
    assert Category.from_dict(cat.to_dict()) == cat


def test_search_result_round_trip():
    result = SearchResult(total=1, count=1, limit=100, items=[Category(id=42)])
    assert SearchResult.from_dict(result.to_dict()) == result