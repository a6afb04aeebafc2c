"""Tests for placer configuration."""

import pytest

from ioplacer.config import PlacerConfig


class TestPlacerConfig:

    def test_defaults(self):
        config = PlacerConfig()
        assert config.slots_per_section == 200
        assert config.slots_usage_factor == 0.8
        assert config.strict_mirroring
        assert config.assign_groups

    @pytest.mark.parametrize("kwargs", [
        {"slots_per_section": 0},
        {"slots_usage_factor": 0.0},
        {"slots_usage_factor": 1.5},
    ])
    def test_out_of_range(self, kwargs):
        with pytest.raises(ValueError):
            PlacerConfig(**kwargs).validate()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "placer.yaml"
        path.write_text("slots_per_section: 50\nstrict_mirroring: false\n")

        config = PlacerConfig.from_yaml(path)

        assert config.slots_per_section == 50
        assert not config.strict_mirroring
        assert config.slots_usage_factor == 0.8

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "placer.yaml"
        path.write_text("")

        assert PlacerConfig.from_yaml(path) == PlacerConfig()

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown config key"):
            PlacerConfig.from_dict({"slot_per_section": 10})

    def test_round_trip_dict(self):
        config = PlacerConfig(slots_per_section=64, assign_groups=False)
        assert PlacerConfig.from_dict(config.to_dict()) == config
