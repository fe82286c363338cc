"""
Tests for settings and generation parameters.
"""

import pytest

from py_mapgen.config.config import Settings
from py_mapgen.config.generation import (
    MapGenerationConfig,
    PlacementConstraints,
    ResourceGenerationConfig,
)


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DB_HOST", "DB_USER", "MIN_MAP_SIZE", "MAX_PLAYERS", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.min_map_size == 10
        assert settings.max_players == 8
        assert settings.generation_timeout > 0

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAX_MAP_WIDTH", "250")
        monkeypatch.setenv("DB_HOST", "db.internal")
        settings = Settings(_env_file=None)

        assert settings.max_map_width == 250
        assert "db.internal" in settings.database_url
        assert settings.database_url.startswith("postgresql://")


class TestGenerationConfig:

    def test_defaults(self):
        config = MapGenerationConfig()
        assert config.terrain.rock_layer.multiplier == 0.4
        assert config.terrain.bedrock_layer.invert_distance is True
        assert config.terrain.bedrock_formations.density_divisor == 800
        assert config.terrain.spawn_clearance.clear_radius == 4
        assert config.resources.base_resource_density == 0.025
        assert config.spawns.strategy == "corners"
        assert config.place_resources is True

    def test_partial_overrides(self):
        config = MapGenerationConfig.from_dict(
            {
                "resources": {"iron_ratio": 0.5, "constraints": {"edge_margin": 2}},
                "spawns": {"strategy": "ring"},
            }
        )
        assert config.resources.iron_ratio == 0.5
        assert config.resources.constraints.edge_margin == 2
        assert config.resources.constraints.max_attempts == 200
        assert config.spawns.strategy == "ring"
        assert config.resources.crystal_ratio == 0.3

    def test_none_gives_defaults(self):
        assert MapGenerationConfig.from_dict(None) == MapGenerationConfig()

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            MapGenerationConfig.from_dict({"resources": {"mithril_ratio": 1}})

    def test_scalar_for_section_rejected(self):
        with pytest.raises(ValueError):
            MapGenerationConfig.from_dict({"terrain": 5})
        with pytest.raises(ValueError):
            MapGenerationConfig.from_dict({"resources": {"spawn_resources": [4, 8]}})

    def test_to_dict_round_trip(self):
        config = MapGenerationConfig.from_dict({"terrain": {"rock_veins": {"density": 4.0}}})
        assert MapGenerationConfig.from_dict(config.to_dict()) == config

    def test_defaults_are_not_shared(self):
        a = ResourceGenerationConfig()
        b = ResourceGenerationConfig()
        a.crystal_cluster.density = 0.1
        assert b.crystal_cluster.density == 0.95

    def test_other_type_multiplier(self):
        constraints = PlacementConstraints()
        assert constraints.other_type_multiplier == 15 / 8
