"""
Search facade.

Binds an index, a model registry and a session context, and hands out
query runners.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional

from ..index.base import SearchIndex
from ..index.memory import InMemoryIndex
from ..query.nodes import BooleanQuery
from ..query.runner import DEFAULT_PER_PAGE, QueryRunner
from ..utils.logging import get_logger, setup_logger
from ..utils.validation import validate_per_page
from .context import SearchContext
from .registry import ModelLoader, ModelRegistry

if TYPE_CHECKING:
    from config.settings import Settings


logger = get_logger(__name__)


class Search:
    """
    Entry point for indexing models and querying them.
    
    Example:
        >>> search = Search(InMemoryIndex(), registry)
        >>> search.update(product)
        >>> search.where("name", "red apple").get()
        [<Product 1>]
    """
    
    def __init__(
        self,
        index: SearchIndex,
        registry: ModelRegistry,
        context: Optional[SearchContext] = None,
        per_page: int = DEFAULT_PER_PAGE,
    ):
        """
        Initialize the facade.
        
        Args:
            index: Index storing the documents
            registry: Registered model types
            context: Session context (a fresh one if None)
            per_page: Default page size for ``paginate``
        """
        self._index = index
        self._registry = registry
        self.context = context or SearchContext()
        self.per_page = validate_per_page(per_page)
    
    def index(self) -> SearchIndex:
        return self._index
    
    def config(self) -> ModelRegistry:
        return self._registry
    
    @property
    def last_query(self) -> Any:
        """Query most recently executed through this facade's context."""
        return self.context.last_query
    
    # =========================================================================
    # QUERYING
    # =========================================================================
    
    def query(self) -> QueryRunner:
        """New runner over an empty boolean query."""
        return QueryRunner(self, BooleanQuery(), per_page=self.per_page)
    
    def where(self, field: Any, value: Any, **options: Any) -> QueryRunner:
        return self.query().where(field, value, **options)
    
    def find(self, value: Any, field: Any = "*", **options: Any) -> QueryRunner:
        return self.query().find(value, field, **options)
    
    def raw_query(self, query: Any) -> QueryRunner:
        return self.query().raw_query(query)
    
    # =========================================================================
    # INDEXING
    # =========================================================================
    
    def update(self, model: Any) -> None:
        """Index ``model``, replacing its previous document."""
        document = self._registry.document_for(model)
        self._index.update(document)
        logger.debug("Indexed %s#%s", document.model_type, document.model_id)
    
    def update_many(self, models: Iterable[Any]) -> int:
        count = 0
        for model in models:
            self.update(model)
            count += 1
        return count
    
    def delete(self, model: Any) -> None:
        """Remove ``model`` from the index."""
        config = self._registry.config_for(model)
        self._index.delete_by_key(config.name, config.model_id(model))
    
    def clear(self) -> None:
        """Remove every document from the index."""
        self._index.clear()
        logger.info("Search index cleared")
    
    # =========================================================================
    # CONSTRUCTION
    # =========================================================================
    
    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        loaders: Optional[Mapping[str, ModelLoader]] = None,
        index: Optional[SearchIndex] = None,
        context: Optional[SearchContext] = None,
    ) -> "Search":
        """
        Build a facade from loaded settings.
        
        Args:
            settings: Settings from ``config.load_config``
            loaders: Model name -> loader
            index: Index to use (an InMemoryIndex if None)
            context: Session context
        """
        setup_logger("lucenesearch", settings.log_level)
        
        registry = ModelRegistry.from_settings(settings.index.models, loaders)
        if index is None:
            index = InMemoryIndex(fuzzy_min_similarity=settings.index.fuzzy_min_similarity)
        
        return cls(
            index,
            registry,
            context=context,
            per_page=settings.query.per_page,
        )
