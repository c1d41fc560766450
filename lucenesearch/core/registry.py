"""
Model registry: which models are indexed, and how hits map back to them.

Each registered model type names the fields whose text is indexed, the
attribute holding its primary key, and a loader that fetches records by
primary key from wherever they live (a database, an API, a dict).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..index.base import Document, Hit
from ..utils.logging import get_logger
from ..utils.validation import validate_field_name, validate_field_names
from .exceptions import ModelNotRegisteredError, ValidationError


logger = get_logger(__name__)

# ids -> records; records lacking from the result are treated as deleted
ModelLoader = Callable[[List[Any]], Iterable[Any]]


def _get_value(model: Any, name: str) -> Any:
    if isinstance(model, Mapping):
        return model.get(name)
    return getattr(model, name, None)


@dataclass
class ModelConfig:
    """Indexing configuration of one model type."""
    
    name: str
    fields: List[str]
    primary_key: str = "id"
    loader: Optional[ModelLoader] = None
    model_class: Optional[type] = None
    
    def model_id(self, model: Any) -> Any:
        value = _get_value(model, self.primary_key)
        if value is None:
            raise ValidationError(
                f"{self.name} model has no value for primary key '{self.primary_key}'"
            )
        return value
    
    def document_for(self, model: Any) -> Document:
        """Build the index document of ``model`` from the configured fields."""
        fields = {}
        for name in self.fields:
            value = _get_value(model, name)
            if value is None:
                continue
            fields[name] = str(value)
        return Document(self.name, self.model_id(model), fields)


class ModelRegistry:
    """
    Registered model types.
    
    Models are matched to a type by ``model_class`` when given, else by
    class name; mappings may carry the type name under ``"_type"``.
    
    Example:
        >>> registry = ModelRegistry()
        >>> registry.register(
        ...     "Product",
        ...     fields=["name", "description"],
        ...     loader=lambda ids: [products[i] for i in ids if i in products],
        ... )
    """
    
    TYPE_KEY = "_type"
    
    def __init__(self):
        self._configs: Dict[str, ModelConfig] = {}
    
    def register(
        self,
        name: str,
        fields: Sequence[str],
        primary_key: str = "id",
        loader: Optional[ModelLoader] = None,
        model_class: Optional[type] = None,
    ) -> ModelConfig:
        """
        Register a model type.
        
        Args:
            name: Model type name stored with every document
            fields: Fields whose text is indexed
            primary_key: Attribute (or key) holding the model's id
            loader: Callable fetching records for a list of ids
            model_class: Class whose instances belong to this type
            
        Returns:
            The model configuration
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Model name must be a non-empty string")
        
        config = ModelConfig(
            name=name.strip(),
            fields=validate_field_names(fields),
            primary_key=validate_field_name(primary_key),
            loader=loader,
            model_class=model_class,
        )
        self._configs[config.name] = config
        logger.debug("Registered model %s with fields %s", config.name, config.fields)
        return config
    
    def set_loader(self, name: str, loader: ModelLoader) -> None:
        self.get(name).loader = loader
    
    def get(self, name: str) -> ModelConfig:
        try:
            return self._configs[name]
        except KeyError:
            raise ModelNotRegisteredError(f"Model type not registered: {name}") from None
    
    def __contains__(self, name: str) -> bool:
        return name in self._configs
    
    def __len__(self) -> int:
        return len(self._configs)
    
    def names(self) -> List[str]:
        return list(self._configs)
    
    def config_for(self, model: Any) -> ModelConfig:
        """Configuration of the type ``model`` belongs to."""
        for config in self._configs.values():
            if config.model_class is not None and isinstance(model, config.model_class):
                return config
        
        if isinstance(model, Mapping) and self.TYPE_KEY in model:
            return self.get(model[self.TYPE_KEY])
        
        return self.get(type(model).__name__)
    
    def document_for(self, model: Any) -> Document:
        return self.config_for(model).document_for(model)
    
    def models_from_hits(self, hits: Sequence[Hit]) -> List[Any]:
        """
        Resolve hits to records, preserving hit order.
        
        Each type's loader is called once with the ids of that type.
        Hits whose record the loader does not return are dropped.
        """
        ids_by_type: Dict[str, List[Any]] = {}
        for hit in hits:
            ids = ids_by_type.setdefault(hit.model_type, [])
            if hit.model_id not in ids:
                ids.append(hit.model_id)
        
        records: Dict[tuple, Any] = {}
        for name, ids in ids_by_type.items():
            config = self.get(name)
            if config.loader is None:
                raise ModelNotRegisteredError(f"No loader configured for model type: {name}")
            for record in config.loader(ids):
                records[(name, config.model_id(record))] = record
        
        models = []
        for hit in hits:
            record = records.get((hit.model_type, hit.model_id))
            if record is None:
                logger.warning("Indexed %s#%s no longer exists", hit.model_type, hit.model_id)
                continue
            models.append(record)
        return models
    
    @classmethod
    def from_settings(
        cls,
        models: Mapping[str, Any],
        loaders: Optional[Mapping[str, ModelLoader]] = None,
    ) -> "ModelRegistry":
        """
        Build a registry from ``IndexSettings.models``.
        
        Args:
            models: Model name -> ModelSettings
            loaders: Model name -> loader
        """
        loaders = loaders or {}
        registry = cls()
        for name, model_settings in models.items():
            registry.register(
                name,
                fields=model_settings.fields,
                primary_key=model_settings.primary_key,
                loader=loaders.get(name),
            )
        return registry
