"""Tests for offline_docs.config_loader -- YAML config discovery and loading."""

import textwrap

import pytest

from offline_docs.config_loader import (
    discover_config_files,
    expand_tree,
    interpolate_env_vars,
    load_hierarchical_config,
    merge_layers,
)

# -------------------------------------------------------------------------
# Env var interpolation
# -------------------------------------------------------------------------


class TestInterpolateEnvVars:
    def test_replaces_set_var(self, monkeypatch):
        monkeypatch.setenv("MY_HOST", "localhost")
        assert interpolate_env_vars("${MY_HOST}") == "localhost"

    def test_unset_var_replaced_with_empty(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert interpolate_env_vars("${UNSET_VAR_XYZ}") == ""

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert (
            interpolate_env_vars("${UNSET_VAR_XYZ:-fallback}")
            == "fallback"
        )

    def test_empty_env_var_uses_default(self, monkeypatch):
        monkeypatch.setenv("EMPTY_VAR", "")
        assert (
            interpolate_env_vars("${EMPTY_VAR:-fallback}") == "fallback"
        )

    def test_literal_dollar_brace_no_closing(self):
        assert interpolate_env_vars("${NO_CLOSE") == "${NO_CLOSE"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("API_HOST", "api.local")
        data = {"api": {"url": "https://${API_HOST}", "timeout": 5}, "l": ["${API_HOST}"]}
        assert expand_tree(data) == {
            "api": {"url": "https://api.local", "timeout": 5},
            "l": ["api.local"],
        }


# -------------------------------------------------------------------------
# Discovery and merge
# -------------------------------------------------------------------------


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Point CWD and HOME at empty temp directories."""
    cwd = tmp_path / "project"
    home = tmp_path / "home"
    cwd.mkdir()
    home.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("OFFLINE_DOCS_CONFIG", raising=False)
    return cwd, home


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


class TestDiscovery:
    def test_no_files_returns_empty(self, isolated_dirs):
        assert discover_config_files() == []
        assert load_hierarchical_config() == {}

    def test_precedence_order(self, isolated_dirs, tmp_path, monkeypatch):
        cwd, home = isolated_dirs
        explicit = _write(tmp_path / "explicit.yml", "api: {}\n")
        project = _write(cwd / ".offline_docs" / "config.yml", "api: {}\n")
        global_ = _write(
            home / ".config" / "offline_docs" / "config.yml", "api: {}\n"
        )
        monkeypatch.setenv("OFFLINE_DOCS_CONFIG", str(explicit))

        assert discover_config_files() == [
            explicit.resolve(),
            project,
            global_,
        ]


class TestLoadHierarchicalConfig:
    def test_project_wins_over_global(self, isolated_dirs):
        cwd, home = isolated_dirs
        _write(
            home / ".config" / "offline_docs" / "config.yml",
            """
            api:
              url: https://global.example.com
            logging:
              level: DEBUG
            """,
        )
        _write(
            cwd / ".offline_docs" / "config.yml",
            """
            api:
              url: https://project.example.com
            """,
        )

        merged = load_hierarchical_config()

        assert merged["api"] == {"url": "https://project.example.com"}
        assert merged["logging"] == {"level": "DEBUG"}

    def test_interpolation_applied(self, isolated_dirs, monkeypatch):
        cwd, _ = isolated_dirs
        monkeypatch.setenv("DOCS_HOST", "docs.internal")
        _write(
            cwd / ".offline_docs" / "config.yml",
            """
            api:
              url: https://${DOCS_HOST}/api
            """,
        )

        assert load_hierarchical_config()["api"]["url"] == (
            "https://docs.internal/api"
        )

    def test_non_dict_root_skipped(self, isolated_dirs):
        cwd, _ = isolated_dirs
        _write(cwd / ".offline_docs" / "config.yml", "- a\n- b\n")

        assert load_hierarchical_config() == {}

    def test_invalid_yaml_raises(self, isolated_dirs):
        import yaml

        cwd, _ = isolated_dirs
        _write(cwd / ".offline_docs" / "config.yml", "api: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_hierarchical_config()


class TestMergeLayers:
    def test_later_layer_replaces_whole_section(self, tmp_path):
        merged = merge_layers(
            [
                (tmp_path / "user.yml", {"api": {"url": "u", "timeout": 3}}),
                (tmp_path / "project.yml", {"api": {"url": "p"}}),
            ]
        )

        assert merged == {"api": {"url": "p"}}

    def test_empty_and_scalar_documents_ignored(self, tmp_path):
        merged = merge_layers(
            [
                (tmp_path / "a.yml", None),
                (tmp_path / "b.yml", "just a string"),
                (tmp_path / "c.yml", {"logging": {"level": "DEBUG"}}),
            ]
        )

        assert merged == {"logging": {"level": "DEBUG"}}
