import pytest

from ecwidkit.carts import (
    Cart,
    CartsService,
    PlaceResult,
    SearchOptions,
    SearchResult,
    UpdateRequest,
)


class FakeApiError(Exception):
    def __init__(self, status_code):
        super().__init__(f"status {status_code}")
        self.status_code = status_code


class FakeRequester:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _respond(self, call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, path, query):
        return self._respond(("GET", path, query))

    def post(self, path, body):
        return self._respond(("POST", path, body))

    def put(self, path, body):
        return self._respond(("PUT", path, body))

    def delete(self, path):
        return self._respond(("DELETE", path, None))


def test_search():
    requester = FakeRequester(
        {
            "total": 1,
            "count": 1,
            "offset": 0,
            "limit": 100,
            "items": [{"cartId": "abc123", "total": 49.99, "email": "test@example.com"}],
        }
    )
    result = CartsService(requester).search(SearchOptions(customer_id=7))
    method, path, query = requester.calls[0]
    assert (method, path) == ("GET", "/carts")
    assert query["customerId"] == "7"
    assert result.total == 1
    assert result.items[0].cart_id == "abc123"


def test_get():
    requester = FakeRequester({"cartId": "abc123", "total": 49.99, "email": "test@example.com"})
    cart = CartsService(requester).get("abc123")
    assert requester.calls[0][:2] == ("GET", "/carts/abc123")
    assert cart.total == 49.99


def test_get_empty_id():
    requester = FakeRequester({})
    with pytest.raises(ValueError):
        CartsService(requester).get("")
    assert requester.calls == []


def test_update():
    requester = FakeRequester({"updateCount": 1})
    result = CartsService(requester).update("abc123", UpdateRequest(hidden=True))
    assert requester.calls[0] == ("PUT", "/carts/abc123", {"hidden": True})
    assert result.update_count == 1


def test_update_empty_id():
    with pytest.raises(ValueError):
        CartsService(FakeRequester({})).update("", UpdateRequest())


def test_place():
    requester = FakeRequester({"orderNumber": 1001})
    result = CartsService(requester).place("abc123")
    assert requester.calls[0][:2] == ("POST", "/carts/abc123/place")
    assert result.order_number == 1001


def test_search_error_propagates():
    requester = FakeRequester(error=FakeApiError(401))
    with pytest.raises(FakeApiError) as exc:
        CartsService(requester).search(None)
    assert exc.value.status_code == 401
    assert requester.calls[0][2] == {}


def test_cart_id_is_path_escaped():
    requester = FakeRequester({"cartId": "a/b"})
    CartsService(requester).get("a/b")
    assert requester.calls[0][1] == "/carts/a%2Fb"


def test_search_options_query_formats_totals():
    query = SearchOptions(total_from=10, total_to=20.5, limit=5).to_query()
    assert query["totalFrom"] == "10.00"
    assert query["totalTo"] == "20.50"
    assert query["limit"] == "5"
    assert "offset" not in query


def test_search_options_empty_gives_no_query():
    assert SearchOptions().to_query() == {}


def test_update_request_omits_unset_hidden():
    assert UpdateRequest().to_dict() == {}
    assert UpdateRequest(hidden=False).to_dict() == {"hidden": False}


def test_cart_round_trip():
    data = {
        "cartId": "abc123",
        "total": 49.99,
        "email": "test@example.com",
        "customerId": 7,
        "items": [{"productId": 1}],
    }
    cart = Cart.from_dict(data)
    assert cart.customer_id == 7
    assert cart.to_dict() == data


def test_cart_to_dict_always_has_cart_id():
    assert Cart().to_dict() == {"cartId": ""}


def test_search_result_round_trip():
    data = {
        "total": 1,
        "count": 1,
        "offset": 0,
        "limit": 100,
        "items": [{"cartId": "abc123"}],
    }
    assert SearchResult.from_dict(data).to_dict() == data


def test_place_result_from_dict():
    result = PlaceResult.from_dict({"id": "X1", "orderNumber": 1001, "cartId": "abc123"})
    assert result.id == "X1"
    assert result.cart_id == "abc123"
    assert result.vendor_order_number == ""