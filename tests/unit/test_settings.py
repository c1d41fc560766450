"""
Unit tests for configuration loading.
"""

import pytest

from config import (
    IndexSettings,
    ModelSettings,
    QuerySettings,
    Settings,
    get_default_config_path,
    load_config,
)


class TestSettings:
    """Settings dataclasses."""
    
    def test_defaults(self):
        settings = Settings()
        
        assert settings.index.models == {}
        assert settings.index.fuzzy_min_similarity == 0.5
        assert settings.query.per_page == 25
        assert settings.log_level == "INFO"
    
    def test_from_dict(self):
        settings = Settings.from_dict({
            "index": {
                "fuzzy_min_similarity": 0.7,
                "models": {"Product": {"fields": ["name"], "primary_key": "sku"}},
            },
            "query": {"per_page": 10},
            "log_level": "DEBUG",
        })
        
        assert settings.index == IndexSettings(
            models={"Product": ModelSettings(fields=["name"], primary_key="sku")},
            fuzzy_min_similarity=0.7,
        )
        assert settings.query == QuerySettings(per_page=10)
        assert settings.log_level == "DEBUG"
    
    def test_from_dict_does_not_mutate_input(self):
        data = {"index": {"models": {}}, "query": {}}
        Settings.from_dict(data)
        
        assert data == {"index": {"models": {}}, "query": {}}
    
    def test_to_dict_round_trip(self):
        settings = Settings.from_dict({"index": {"models": {"A": {"fields": ["x"]}}}})
        assert Settings.from_dict(settings.to_dict()) == settings
    
    def test_unknown_key(self):
        with pytest.raises(TypeError):
            Settings.from_dict({"query": {"page_size": 10}})


class TestLoadConfig:
    """YAML loading."""
    
    def test_load_file(self, tmp_path):
        path = tmp_path / "search.yaml"
        path.write_text(
            "index:\n"
            "  models:\n"
            "    Product:\n"
            "      fields: [name, description]\n"
            "query:\n"
            "  per_page: 5\n"
        )
        
        settings = load_config(str(path))
        
        assert settings.index.models["Product"].fields == ["name", "description"]
        assert settings.index.models["Product"].primary_key == "id"
        assert settings.query.per_page == 5
    
    def test_missing_file(self, tmp_path):
        assert load_config(str(tmp_path / "missing.yaml")) == Settings()
    
    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        
        assert load_config(str(path)) == Settings()
    
    def test_default_config(self, monkeypatch):
        monkeypatch.delenv("LUCENESEARCH_CONFIG", raising=False)
        settings = load_config()
        
        assert settings.query.per_page == 25
        assert settings.index.models == {}
    
    def test_env_var_overrides_default(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("query:\n  per_page: 7\n")
        monkeypatch.setenv("LUCENESEARCH_CONFIG", str(path))
        
        assert get_default_config_path() == path
        assert load_config().query.per_page == 7
    
    def test_env_var_pointing_nowhere(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LUCENESEARCH_CONFIG", str(tmp_path / "missing.yaml"))
        
        assert get_default_config_path().exists()
        assert load_config().query.per_page == 25
