from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml
from dotenv import load_dotenv

from place_autocomplete.config.models import (
    AppConfig,
    ConfigLoadRequest,
)

logger = logging.getLogger(__name__)


def _merge_yaml_file(config: MutableMapping[str, Any], path: Path) -> None:
    """Overlay the YAML file onto the model defaults, section by section."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    if document is None:
        return
    if not isinstance(document, dict):
        raise ValueError(f"Top-level YAML must be a mapping, got: {type(document).__name__}")

    pending: list[tuple[MutableMapping[str, Any], Mapping[str, Any]]] = [(config, document)]
    while pending:
        target, overlay = pending.pop()
        for key, value in overlay.items():
            current = target.get(key)
            if isinstance(value, Mapping) and isinstance(current, MutableMapping):
                pending.append((current, value))
            else:
                target[key] = value


def _resolve_override(
    config: MutableMapping[str, Any], name: str, prefix: str
) -> tuple[MutableMapping[str, Any], str, str]:
    """Map `<prefix>SECTION__KEY` onto the mapping that holds `key`."""
    segments = [part.lower() for part in name[len(prefix) :].split("__") if part]
    if not segments:
        raise ValueError(f"Invalid environment variable override name: {name}")
    dotted = ".".join(segments)

    section: Any = config
    for segment in segments[:-1]:
        section = section.get(segment) if isinstance(section, Mapping) else None
        if not isinstance(section, MutableMapping):
            raise KeyError(f"Unknown configuration key path: {dotted}")
    leaf = segments[-1]
    if leaf not in section:
        raise KeyError(f"Unknown configuration key path: {dotted}")
    return section, leaf, dotted


def _apply_env_overrides(config: MutableMapping[str, Any], env_prefix: str) -> None:
    """
    Apply `<prefix>SECTION__KEY=value` overrides onto scalar leaves.

    Values stay strings here; pydantic coerces them to the field type during validation.
    """
    for name, value in os.environ.items():
        if not name.startswith(env_prefix):
            continue

        section, leaf, dotted = _resolve_override(config, name, env_prefix)
        if isinstance(section[leaf], (dict, list)):
            raise TypeError(
                f"Environment variable overrides are only allowed for scalar values. "
                f"Key '{dotted}' is {type(section[leaf]).__name__}."
            )
        logger.debug("Applying configuration override from environment. key=%s", dotted)
        section[leaf] = value


class YamlConfigLoader:
    async def load(self, request: ConfigLoadRequest = ConfigLoadRequest()) -> AppConfig:
        config: dict[str, Any] = copy.deepcopy(AppConfig().model_dump(mode="python"))

        _merge_yaml_file(config, Path(request.yaml_path))

        if request.dotenv_path is not None:
            dotenv_path = Path(request.dotenv_path)
            if dotenv_path.exists():
                load_dotenv(dotenv_path=dotenv_path, override=False)

        _apply_env_overrides(config, request.env_prefix)
        return AppConfig.model_validate(config)
