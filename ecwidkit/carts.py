"""Abandoned carts API: types and service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol
from urllib.parse import quote


class _Requester(Protocol):
    def get(self, path: str, query: Optional[Mapping[str, str]]) -> Any: ...

    def post(self, path: str, body: Any) -> Any: ...

    def put(self, path: str, body: Any) -> Any: ...

    def delete(self, path: str) -> Any: ...


def _path_escape(segment: str) -> str:
    return quote(segment, safe="$&+:=@")


# (attribute, wire key, always emitted)
_CART_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("cart_id", "cartId", True),
    ("tax", "tax", False),
    ("subtotal", "subtotal", False),
    ("total", "total", False),
    ("usd_total", "usdTotal", False),
    ("payment_method", "paymentMethod", False),
    ("referer_url", "refererUrl", False),
    ("global_referer", "globalReferer", False),
    ("create_date", "createDate", False),
    ("update_date", "updateDate", False),
    ("create_timestamp", "createTimestamp", False),
    ("update_timestamp", "updateTimestamp", False),
    ("hidden", "hidden", False),
    ("order_comments", "orderComments", False),
    ("email", "email", False),
    ("ip_address", "ipAddress", False),
    ("customer_id", "customerId", False),
    ("customer_group_id", "customerGroupId", False),
    ("customer_group", "customerGroup", False),
    ("items", "items", False),
    ("billing_person", "billingPerson", False),
    ("shipping_person", "shippingPerson", False),
    ("shipping_option", "shippingOption", False),
    ("discount_coupon", "discountCoupon", False),
    ("discount_info", "discountInfo", False),
)


@dataclass
class Cart:
    """An abandoned cart."""

    cart_id: str = ""
    tax: float = 0.0
    subtotal: float = 0.0
    total: float = 0.0
    usd_total: float = 0.0
    payment_method: str = ""
    referer_url: str = ""
    global_referer: str = ""
    create_date: str = ""
    update_date: str = ""
    create_timestamp: int = 0
    update_timestamp: int = 0
    hidden: bool = False
    order_comments: str = ""
    email: str = ""
    ip_address: str = ""
    customer_id: int = 0
    customer_group_id: int = 0
    customer_group: str = ""
    items: Any = None
    billing_person: Any = None
    shipping_person: Any = None
    shipping_option: Any = None
    discount_coupon: Any = None
    discount_info: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Cart:
        values = {
            attr: data[key]
            for attr, key, _ in _CART_FIELDS
            if key in data and data[key] is not None
        }
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for attr, key, always in _CART_FIELDS:
            value = getattr(self, attr)
            if always or value:
                result[key] = value
        return result


@dataclass
class SearchResult:
    """A page of carts."""

    total: int = 0
    count: int = 0
    offset: int = 0
    limit: int = 0
    items: list[Cart] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchResult:
        return cls(
            total=data.get("total", 0),
            count=data.get("count", 0),
            offset=data.get("offset", 0),
            limit=data.get("limit", 0),
            items=[Cart.from_dict(item) for item in data.get("items") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "count": self.count,
            "offset": self.offset,
            "limit": self.limit,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass
class SearchOptions:
    """Filters for searching abandoned carts."""

    created_from: str = ""
    created_to: str = ""
    updated_from: str = ""
    updated_to: str = ""
    customer_id: int = 0
    total_from: Optional[float] = None
    total_to: Optional[float] = None
    offset: int = 0
    limit: int = 0

    def to_query(self) -> dict[str, str]:
        """Return the query parameters for the set filters."""
        query: dict[str, str] = {}
        if self.created_from:
            query["createdFrom"] = self.created_from
        if self.created_to:
            query["createdTo"] = self.created_to
        if self.updated_from:
            query["updatedFrom"] = self.updated_from
        if self.updated_to:
            query["updatedTo"] = self.updated_to
        if self.customer_id > 0:
            query["customerId"] = str(self.customer_id)
        if self.total_from is not None:
            query["totalFrom"] = f"{self.total_from:.2f}"
        if self.total_to is not None:
            query["totalTo"] = f"{self.total_to:.2f}"
        if self.offset > 0:
            query["offset"] = str(self.offset)
        if self.limit > 0:
            query["limit"] = str(self.limit)
        return query


@dataclass
class UpdateRequest:
    """Fields to change on an abandoned cart."""

    hidden: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return {} if self.hidden is None else {"hidden": self.hidden}


@dataclass
class UpdateResult:
    update_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UpdateResult:
        return cls(update_count=data.get("updateCount", 0))


@dataclass
class PlaceResult:
    """The order created from a cart."""

    id: str = ""
    order_number: int = 0
    vendor_order_number: str = ""
    cart_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlaceResult:
        return cls(
            id=data.get("id", ""),
            order_number=data.get("orderNumber", 0),
            vendor_order_number=data.get("vendorOrderNumber", ""),
            cart_id=data.get("cartId", ""),
        )


def _cart_path(cart_id: str) -> str:
    if not cart_id:
        raise ValueError("cart_id must not be empty")
    return "/carts/" + _path_escape(cart_id)


class CartsService:
    """Access to the abandoned carts endpoints."""

    def __init__(self, requester: _Requester) -> None:
        self._requester = requester

    def search(self, opts: Optional[SearchOptions] = None) -> SearchResult:
        """GET /carts (scope read_orders)."""
        query = opts.to_query() if opts is not None else {}
        return SearchResult.from_dict(self._requester.get("/carts", query) or {})

    def get(self, cart_id: str) -> Cart:
        """GET /carts/{cartId} (scope read_orders)."""
        path = _cart_path(cart_id)
        return Cart.from_dict(self._requester.get(path, None) or {})

    def update(self, cart_id: str, req: Optional[UpdateRequest]) -> UpdateResult:
        """PUT /carts/{cartId} (scope update_orders)."""
        path = _cart_path(cart_id)
        body = req.to_dict() if req is not None else None
        return UpdateResult.from_dict(self._requester.put(path, body) or {})

    def place(self, cart_id: str) -> PlaceResult:
        """POST /carts/{cartId}/place (scope create_orders)."""
        path = _cart_path(cart_id) + "/place"
        return PlaceResult.from_dict(self._requester.post(path, None) or {})