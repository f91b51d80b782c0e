"""Categories API: types and service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol


class _Requester(Protocol):
    def get(self, path: str, query: Optional[Mapping[str, str]]) -> Any: ...

    def post(self, path: str, body: Any) -> Any: ...

    def put(self, path: str, body: Any) -> Any: ...

    def delete(self, path: str) -> Any: ...


# (attribute, wire key); "id" is always emitted, the rest only when set.
_CATEGORY_FIELDS: tuple[tuple[str, str], ...] = (
    ("id", "id"),
    ("parent_id", "parentId"),
    ("order_by", "orderBy"),
    ("hd_thumbnail_url", "hdThumbnailUrl"),
    ("thumbnail_url", "thumbnailUrl"),
    ("image_url", "imageUrl"),
    ("original_image_url", "originalImageUrl"),
    ("original_image", "originalImage"),
    ("thumbnail", "thumbnail"),
    ("name", "name"),
    ("name_translated", "nameTranslated"),
    ("url", "url"),
    ("autogenerated_slug", "autogeneratedSlug"),
    ("custom_slug", "customSlug"),
    ("product_count", "productCount"),
    ("enabled_product_count", "enabledProductCount"),
    ("description", "description"),
    ("description_translated", "descriptionTranslated"),
    ("enabled", "enabled"),
    ("product_ids", "productIds"),
    ("is_sample_category", "isSampleCategory"),
)

# Fields emitted whenever they are present at all, even if falsy.
_PRESENCE_FIELDS = frozenset(
    {
        "original_image",
        "thumbnail",
        "name_translated",
        "description_translated",
        "enabled",
    }
)


@dataclass
class Category:
    """A product category."""

    id: int = 0
    parent_id: int = 0
    order_by: int = 0
    hd_thumbnail_url: str = ""
    thumbnail_url: str = ""
    image_url: str = ""
    original_image_url: str = ""
    original_image: Any = None
    thumbnail: Any = None
    name: str = ""
    name_translated: Any = None
    url: str = ""
    autogenerated_slug: str = ""
    custom_slug: str = ""
    product_count: int = 0
    enabled_product_count: int = 0
    description: str = ""
    description_translated: Any = None
    enabled: Optional[bool] = None
    product_ids: list[int] = field(default_factory=list)
    is_sample_category: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Category:
        values = {
            attr: data[key]
            for attr, key in _CATEGORY_FIELDS
            if key in data and data[key] is not None
        }
        if "product_ids" in values:
            values["product_ids"] = list(values["product_ids"])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for attr, key in _CATEGORY_FIELDS:
            value = getattr(self, attr)
            if attr == "id":
                result[key] = value
            elif attr in _PRESENCE_FIELDS:
                if value is not None:
                    result[key] = value
            elif value:
                result[key] = list(value) if attr == "product_ids" else value
        return result


@dataclass
class SearchResult:
    """A page of categories."""

    total: int = 0
    count: int = 0
    offset: int = 0
    limit: int = 0
    items: list[Category] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchResult:
        return cls(
            total=data.get("total", 0),
            count=data.get("count", 0),
            offset=data.get("offset", 0),
            limit=data.get("limit", 0),
            items=[Category.from_dict(item) for item in data.get("items") or []],
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
    """Filters for searching categories."""

    keyword: str = ""
    parent: int = 0
    parent_ids: str = ""
    with_subcategories: Optional[bool] = None
    hidden_categories: Optional[bool] = None
    offset: int = 0
    limit: int = 0
    lang: str = ""

    def to_query(self) -> dict[str, str]:
        """Return the query parameters for the set filters."""
        query: dict[str, str] = {}
        if self.keyword:
            query["keyword"] = self.keyword
        if self.parent > 0:
            query["parent"] = str(self.parent)
        if self.parent_ids:
            query["parentIds"] = self.parent_ids
        if self.with_subcategories:
            query["withSubcategories"] = "true"
        if self.hidden_categories:
            query["hidden_categories"] = "true"
        if self.offset > 0:
            query["offset"] = str(self.offset)
        if self.limit > 0:
            query["limit"] = str(self.limit)
        if self.lang:
            query["lang"] = self.lang
        return query


@dataclass
class ProductOrderResult:
    """Sorted product IDs within a category."""

    sorted_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProductOrderResult:
        return cls(sorted_ids=list(data.get("sortedIds") or []))


@dataclass
class CreateResult:
    id: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CreateResult:
        return cls(id=data.get("id", 0))


@dataclass
class UpdateResult:
    update_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UpdateResult:
        return cls(update_count=data.get("updateCount", 0))


@dataclass
class DeleteResult:
    delete_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeleteResult:
        return cls(delete_count=data.get("deleteCount", 0))


def _category_path(category_id: int) -> str:
    if category_id == 0:
        raise ValueError("category_id must not be zero")
    return f"/categories/{category_id}"


class CategoriesService:
    """Access to the categories endpoints."""

    def __init__(self, requester: _Requester) -> None:
        self._requester = requester

    def search(self, opts: Optional[SearchOptions] = None) -> SearchResult:
        """GET /categories (scope read_catalog)."""
        query = opts.to_query() if opts is not None else {}
        return SearchResult.from_dict(
            self._requester.get("/categories", query) or {}
        )

    def get(self, category_id: int) -> Category:
        """GET /categories/{categoryId} (scope read_catalog)."""
        path = _category_path(category_id)
        return Category.from_dict(self._requester.get(path, None) or {})

    def create(self, category: Optional[Category]) -> CreateResult:
        """POST /categories (scope create_catalog)."""
        body = category.to_dict() if category is not None else None
        return CreateResult.from_dict(
            self._requester.post("/categories", body) or {}
        )

    def update(self, category_id: int, category: Optional[Category]) -> UpdateResult:
        """PUT /categories/{categoryId} (scope update_catalog)."""
        path = _category_path(category_id)
        body = category.to_dict() if category is not None else None
        return UpdateResult.from_dict(self._requester.put(path, body) or {})

    def delete(self, category_id: int) -> DeleteResult:
        """DELETE /categories/{categoryId} (scope update_catalog)."""
        path = _category_path(category_id)
        return DeleteResult.from_dict(self._requester.delete(path) or {})

    def get_product_order(self, category_id: int) -> ProductOrderResult:
        """GET /products/sort?parentCategory={categoryId} (scope read_catalog)."""
        query = {"parentCategory": str(category_id)}
        return ProductOrderResult.from_dict(
            self._requester.get("/products/sort", query) or {}
        )