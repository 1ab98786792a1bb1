"""Locate, read, and combine offline_docs YAML config files.

Three places are searched: the file named by ``OFFLINE_DOCS_CONFIG``, the
project file under ``./.offline_docs/`` and the per-user file under
``~/.config/offline_docs/``.  Each file replaces whole top-level sections
of the files below it, and ``${VAR}`` references are expanded last.
"""

import logging
import os
import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "OFFLINE_DOCS_CONFIG"
PROJECT_CONFIG = Path(".offline_docs", "config.yml")
USER_CONFIG = Path(".config", "offline_docs", "config.yml")

# ${NAME} or ${NAME:-fallback}
_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+?)(?::-(?P<fallback>.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Expand ``${NAME}`` and ``${NAME:-fallback}`` references in *value*.

    An unset or empty variable expands to its fallback, or to ``""`` when
    there is none.  An unterminated ``${`` is kept as written.
    """
    return _REFERENCE.sub(
        lambda m: os.environ.get(m["name"]) or m["fallback"] or "", value
    )


def expand_tree(node: Any) -> Any:
    """Return a copy of *node* with every nested string expanded."""
    match node:
        case str():
            return interpolate_env_vars(node)
        case dict():
            return {key: expand_tree(item) for key, item in node.items()}
        case list():
            return [expand_tree(item) for item in node]
        case _:
            return node


def _candidate_paths() -> Iterator[Path]:
    explicit = os.environ.get(CONFIG_PATH_ENV)
    if explicit:
        yield Path(explicit).expanduser().resolve()
    yield Path.cwd() / PROJECT_CONFIG
    yield Path.home() / USER_CONFIG


def discover_config_files() -> list[Path]:
    """Existing config files, highest precedence first."""
    return [path for path in _candidate_paths() if path.exists()]


def load_yaml_file(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def merge_layers(layers: Iterable[tuple[Path, Any]]) -> dict[str, Any]:
    """Fold ``(path, data)`` pairs given lowest precedence first.

    Documents whose root is not a mapping contribute nothing.
    """
    merged: dict[str, Any] = {}
    for path, data in layers:
        if data is None:
            continue
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring %s: expected a mapping at the top level, got %s",
                path,
                type(data).__name__,
            )
            continue
        merged.update(data)
    return merged


def load_hierarchical_config() -> dict[str, Any]:
    """Read every discovered config file and return the combined mapping.

    Raises:
        yaml.YAMLError: If any discovered file is not valid YAML.
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config files found")
        return {}

    layers = []
    for path in reversed(paths):
        logger.debug("Reading config file %s", path)
        try:
            layers.append((path, load_yaml_file(path)))
        except yaml.YAMLError as e:
            logger.error("Invalid YAML in %s: %s", path, e)
            raise

    return expand_tree(merge_layers(layers))
