"""Tests for ranking configuration loading."""

import pytest

from synset_rank import ConfigError, RankingConfig, load_config


class TestRankingConfig:

    def test_defaults(self):
        config = RankingConfig()
        assert config.damping == 0.85
        assert config.max_iterations == 30
        assert config.epsilon == 1e-4
        assert config.use_weight is True

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"damping": 0.0},
            {"damping": 1.0},
            {"max_iterations": 0},
            {"max_iterations": 2.5},
            {"epsilon": 0.0},
        ],
    )
    def test_out_of_range(self, kwargs):
        with pytest.raises(ConfigError):
            RankingConfig(**kwargs)


class TestLoadConfig:

    def test_none_gives_defaults(self):
        assert load_config() == RankingConfig()

    def test_from_dict(self):
        config = load_config({"damping": 0.9, "use_weight": False})
        assert config.damping == 0.9
        assert config.use_weight is False
        assert config.max_iterations == 30

    def test_from_yaml_string(self):
        config = load_config("ranking:\n  max_iterations: 100\n  epsilon: 1.0e-6\n")
        assert config.max_iterations == 100
        assert config.epsilon == 1e-6

    def test_from_file(self, tmp_path):
        path = tmp_path / "rank.yaml"
        path.write_text("damping: 0.5\n")
        assert load_config(path).damping == 0.5
        assert load_config(str(path)).damping == 0.5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError):
            load_config("damping: [0.5")

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigError):
            load_config("- 1\n- 2\n")

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="teleport"):
            load_config({"teleport": 0.1})

    def test_bad_value(self):
        with pytest.raises(ConfigError):
            load_config({"damping": "lots"})

    @pytest.mark.parametrize("value", ["false", "no", 0, 1])
    def test_use_weight_must_be_boolean(self, value):
        with pytest.raises(ConfigError, match="use_weight"):
            load_config({"use_weight": value})

    def test_use_weight_from_yaml(self):
        assert load_config("use_weight: false\n").use_weight is False

    def test_round_trip_dict(self):
        config = RankingConfig(damping=0.7, max_iterations=12)
        assert load_config(config.to_dict()) == config
