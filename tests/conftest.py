"""
Pytest fixtures for lucenesearch tests.
"""

import pytest
from typing import Any, Dict, List

from lucenesearch import InMemoryIndex, ModelRegistry, Search, SearchContext
from lucenesearch.index import Hit


PRODUCTS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Red apple", "description": "Crisp and sweet red apple from the orchard"},
    {"id": 2, "name": "Green apple", "description": "Sour green apple, good for baking"},
    {"id": 3, "name": "Green pear", "description": "Juicy pear with a thin green skin"},
    {"id": 4, "name": "Banana", "description": "Sweet yellow fruit"},
    {"id": 5, "name": "Apple pie", "description": "Baked pie made of sweet apples"},
]


def make_product(**fields) -> Dict[str, Any]:
    return {"_type": "Product", **fields}


@pytest.fixture
def products() -> Dict[int, Dict[str, Any]]:
    """Product records keyed by id."""
    return {p["id"]: make_product(**p) for p in PRODUCTS}


@pytest.fixture
def registry(products) -> ModelRegistry:
    """Registry with a Product model backed by the ``products`` dict."""
    registry = ModelRegistry()
    registry.register(
        "Product",
        fields=["name", "description"],
        loader=lambda ids: [products[i] for i in ids if i in products],
    )
    return registry


@pytest.fixture
def index() -> InMemoryIndex:
    return InMemoryIndex()


@pytest.fixture
def search(index, registry) -> Search:
    """Search facade over an empty index."""
    return Search(index, registry, context=SearchContext(), per_page=2)


@pytest.fixture
def populated_search(search, products) -> Search:
    """Search facade with every product indexed."""
    search.update_many(products.values())
    return search


class FakeIndex:
    """Index double returning fixed hits and recording every query."""
    
    def __init__(self, hits=None):
        self.hits = list(hits or [])
        self.queries = []
    
    def find(self, query):
        self.queries.append(query)
        return list(self.hits)


class FakeRegistry:
    """Registry double turning hits into their model ids."""
    
    def __init__(self):
        self.calls = []
    
    def models_from_hits(self, hits):
        self.calls.append(list(hits))
        return [hit.model_id for hit in hits]


class FakeSearch:
    """Minimal facade exposing what QueryRunner needs."""
    
    def __init__(self, hits=None, context=None):
        self.fake_index = FakeIndex(hits)
        self.fake_registry = FakeRegistry()
        self.context = context or SearchContext()
        self.deleted = []
    
    def index(self):
        return self.fake_index
    
    def config(self):
        return self.fake_registry
    
    def delete(self, model):
        self.deleted.append(model)


def make_hits(ids) -> List[Hit]:
    return [Hit(doc_id=i, score=1.0, model_type="Product", model_id=i) for i in ids]


@pytest.fixture
def fake_search() -> FakeSearch:
    """Facade double whose index returns hits for ids 1..5."""
    return FakeSearch(make_hits([1, 2, 3, 4, 5]))


@pytest.fixture
def fake_search_factory():
    """Build a FakeSearch whose index returns hits for the given ids."""
    def factory(ids=(), context=None) -> FakeSearch:
        return FakeSearch(make_hits(ids), context=context)
    return factory
