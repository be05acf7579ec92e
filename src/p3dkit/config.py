"""Loader configuration (JSON/YAML).

Example YAML::

    files:
      - global.p3d
      - l1z1.p3d
    strict: false
    seed: 1234
    max_file_size: 67108864

File paths are resolved relative to the configuration file and may not
escape its directory. ``P3DKIT_SEED`` in the environment overrides ``seed``.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml

from .errors import config_error
from .format.constants import DEFAULT_MAX_FILE_SIZE
from .utils.paths import safe_file_path

__all__ = ["LoaderConfig", "load_config", "parse_config", "apply_env"]

ENV_SEED = "P3DKIT_SEED"


@dataclass(slots=True)
class LoaderConfig:
    files: List[Path] = field(default_factory=list)
    strict: bool = False
    seed: Optional[int] = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


def load_config(path: str | Path) -> LoaderConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise config_error(f"Cannot parse {p.name}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise config_error("Root of configuration must be an object")
    return parse_config(data, p.parent)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_config(data: Mapping[str, Any], base_dir: Path) -> LoaderConfig:
    files = data.get("files", [])
    if not isinstance(files, list) or not all(
        isinstance(f, str) for f in files
    ):
        raise config_error(
            "'files' must be a list of strings", {"files": files}
        )
    resolved: List[Path] = []
    for f in files:
        try:
            resolved.append(safe_file_path(base_dir, f))
        except ValueError:
            raise config_error(
                "File path escapes the configuration directory", {"file": f}
            ) from None

    strict = data.get("strict", False)
    if not isinstance(strict, bool):
        raise config_error("'strict' must be a boolean", {"strict": strict})

    seed = data.get("seed")
    if seed is not None and not _is_int(seed):
        raise config_error("'seed' must be an integer or null", {"seed": seed})

    max_size = data.get("max_file_size", DEFAULT_MAX_FILE_SIZE)
    if not _is_int(max_size) or max_size <= 0:
        raise config_error(
            "'max_file_size' must be a positive integer",
            {"max_file_size": max_size},
        )
    return LoaderConfig(
        files=resolved, strict=strict, seed=seed, max_file_size=max_size
    )


def apply_env(
    config: LoaderConfig, environ: Mapping[str, str] | None = None
) -> LoaderConfig:
    env = os.environ if environ is None else environ
    raw = env.get(ENV_SEED)
    if raw is None or raw == "":
        return config
    try:
        seed = int(raw)
    except ValueError:
        raise config_error(
            f"{ENV_SEED} must be an integer", {"value": raw}
        ) from None
    return replace(config, seed=seed)
