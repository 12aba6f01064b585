"""Tests for wikiparser.config."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from wikiparser.config import (
    CONFIG_TEMPLATE,
    DEFAULTS,
    ConfigError,
    _deep_merge,
    _validate,
    load_config,
)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a minimal .wikiparser/config.yaml in tmp_path."""
    config_dir = tmp_path / ".wikiparser"
    config_dir.mkdir()
    config = {"link_root": "/wiki/", "output": {"indent": 4}}
    (config_dir / "config.yaml").write_text(yaml.dump(config))
    return tmp_path


class TestDeepMerge:
    def test_flat_merge(self) -> None:
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        assert _deep_merge(base, override) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        base = {"x": {"a": 1, "b": 2}}
        override = {"x": {"b": 3}}
        assert _deep_merge(base, override) == {"x": {"a": 1, "b": 3}}

    def test_override_replaces_non_dict(self) -> None:
        base = {"x": {"a": 1}}
        override = {"x": "flat"}
        assert _deep_merge(base, override) == {"x": "flat"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base["a"]["b"] == 1


class TestValidate:
    def _config(self, **overrides: object) -> dict:
        return _deep_merge(DEFAULTS, overrides)

    def test_defaults_valid(self) -> None:
        _validate(DEFAULTS)

    def test_bad_policy(self) -> None:
        with pytest.raises(ConfigError, match="on_malformed"):
            _validate(self._config(on_malformed="ignore"))

    @pytest.mark.parametrize("workers", [0, -2, "4", True, 1.5])
    def test_bad_workers(self, workers: object) -> None:
        with pytest.raises(ConfigError, match="workers"):
            _validate(self._config(workers=workers))

    def test_bad_link_root(self) -> None:
        with pytest.raises(ConfigError, match="link_root"):
            _validate(self._config(link_root=None))

    def test_empty_link_root(self) -> None:
        with pytest.raises(ConfigError, match="link_root"):
            _validate(self._config(link_root=""))

    def test_indent_null_allowed(self) -> None:
        _validate(self._config(output={"indent": None}))

    def test_bad_indent(self) -> None:
        with pytest.raises(ConfigError, match="indent"):
            _validate(self._config(output={"indent": -1}))

    def test_output_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError, match="output"):
            _validate(self._config(output="pretty"))

    def test_bad_ensure_ascii(self) -> None:
        with pytest.raises(ConfigError, match="ensure_ascii"):
            _validate(self._config(output={"ensure_ascii": "yes"}))


class TestLoadConfig:
    def test_merges_defaults(self, project_dir: Path) -> None:
        config = load_config(project_dir)
        assert config["link_root"] == "/wiki/"
        assert config["output"]["indent"] == 4
        assert config["output"]["ensure_ascii"] is False
        assert config["on_malformed"] == "paragraph"

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == DEFAULTS

    def test_defaults_not_shared(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        config["output"]["indent"] = 8
        assert DEFAULTS["output"]["indent"] == 2

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("on_malformed: error\n")
        assert load_config(config_path=path)["on_malformed"] == "error"

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config not found"):
            load_config(config_path=tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(config_path=path) == DEFAULTS

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="YAML mapping"):
            load_config(config_path=path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("link_root: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_path=path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("workers: 0\n")
        with pytest.raises(ConfigError):
            load_config(config_path=path)

    def test_template_matches_defaults(self) -> None:
        assert _deep_merge(DEFAULTS, yaml.safe_load(CONFIG_TEMPLATE)) == DEFAULTS
