"""Load tutorial configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import IndexConfig, TutorialConfig, TutorialConfigError

PATH_KEYS = ("examples_dir", "output_dir", "test_report")
STRING_KEYS = ("source_root", "code_language")


def _require_str(raw: typ.Mapping[str, typ.Any], key: str) -> str | None:
    """Return ``raw[key]`` when it is a non-empty string, ``None`` when unset."""
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        msg = f"'{key}' must be a non-empty string."
        raise TutorialConfigError(msg)
    return value.strip()


def _build_index_config(raw: object) -> IndexConfig:
    """Build the index settings from the optional ``index`` mapping."""
    match raw:
        case None:
            return IndexConfig()
        case bool():
            return IndexConfig(enabled=raw)
        case dict():
            enabled = raw.get("enabled", True)
            if not isinstance(enabled, bool):
                msg = "'index.enabled' must be a boolean."
                raise TutorialConfigError(msg)
            readme = _require_str(raw, "readme") or IndexConfig.readme
            return IndexConfig(enabled=enabled, readme=readme)
        case _:
            msg = "'index' must be a mapping or a boolean."
            raise TutorialConfigError(msg)


def load_tutorial_config(path: Path) -> TutorialConfig:
    """Load the YAML configuration describing a tutorial documentation build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML file (for example, ``tutorials.yaml``).

    Returns
    -------
    TutorialConfig
        Parsed configuration with every path resolved against ``root_dir``.
        ``root_dir`` itself defaults to the directory holding the file.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    TutorialConfigError
        If a field has the wrong type or is empty.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tutorial_docs.config import load_tutorial_config
    >>> config = load_tutorial_config(Path("tutorials.yaml"))  # doctest: +SKIP
    >>> config.output_dir.name  # doctest: +SKIP
    'examples'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    config_dir = path.resolve().parent
    root_value = _require_str(raw, "root_dir")
    root_dir = config_dir / root_value if root_value else config_dir

    overrides: dict[str, typ.Any] = {}
    for key in PATH_KEYS:
        value = _require_str(raw, key)
        if value is not None:
            overrides[key] = Path(value)
    for key in STRING_KEYS:
        value = _require_str(raw, key)
        if value is not None:
            overrides[key] = value

    return TutorialConfig(
        root_dir=root_dir,
        index=_build_index_config(raw.get("index")),
        **overrides,
    )


__all__ = ["load_tutorial_config"]
