"""
Configuration management for lucenesearch.

Provides dataclasses for configuration and utilities
for loading settings from YAML files.
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional
import yaml


CONFIG_ENV_VAR = "LUCENESEARCH_CONFIG"


@dataclass
class ModelSettings:
    """Indexed fields and primary key of one model type."""
    fields: List[str] = field(default_factory=list)
    primary_key: str = "id"


@dataclass
class IndexSettings:
    """Search index configuration."""
    models: Dict[str, ModelSettings] = field(default_factory=dict)
    fuzzy_min_similarity: float = 0.5


@dataclass
class QuerySettings:
    """Query runner configuration."""
    per_page: int = 25


@dataclass
class Settings:
    """
    Main settings container for lucenesearch.
    
    Attributes:
        index: Indexed model types and index tuning
        query: Query runner defaults
        log_level: Logging level
    """
    index: IndexSettings = field(default_factory=IndexSettings)
    query: QuerySettings = field(default_factory=QuerySettings)
    log_level: str = "INFO"
    
    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary."""
        data = dict(data)
        index_data = dict(data.pop("index", None) or {})
        query_data = data.pop("query", None) or {}
        
        models = {
            name: ModelSettings(**(model_data or {}))
            for name, model_data in (index_data.pop("models", None) or {}).items()
        }
        
        return cls(
            index=IndexSettings(models=models, **index_data),
            query=QuerySettings(**query_data),
            **data
        )
    
    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        return asdict(self)


def _config_candidates() -> Iterator[Path]:
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        yield Path(env_config)
    
    yield Path("./config/default_config.yaml")
    yield Path(__file__).parent / "default_config.yaml"


def get_default_config_path() -> Path:
    """
    Path of the configuration file used when none is given.
    
    The first existing file among the one named by ``LUCENESEARCH_CONFIG``,
    the working directory's ``config/default_config.yaml`` and the packaged
    default wins.
    """
    for path in _config_candidates():
        if path.exists():
            return path
    return Path(__file__).parent / "default_config.yaml"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to config file. If None, uses default.
        
    Returns:
        Settings object with loaded configuration
        
    Example:
        >>> settings = load_config()
        >>> settings = load_config("./search.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)
    
    if not path.exists():
        return Settings()
    
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    
    if data is None:
        return Settings()
    
    return Settings.from_dict(data)
