"""
Configuration loading utilities for markovgraph.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Type

import yaml
from pydantic import BaseModel

from .models import MarkovGraphConfiguration


def _key_parts(dotted_key: str) -> List[str]:
    parts = [part.strip() for part in dotted_key.split(".")]
    if not all(parts):
        raise ValueError(f"Override keys must be non-empty dotted paths (got {dotted_key!r})")
    return parts


def override_annotation(dotted_key: str) -> Optional[object]:
    """
    Resolve the declared type of the configuration field a dotted key names.

    :param dotted_key: Dotted key such as ``generation.delimiter``.
    :type dotted_key: str
    :return: Field annotation, or None when the key names no configuration field.
    :rtype: object or None
    """
    model: Optional[Type[BaseModel]] = MarkovGraphConfiguration
    annotation: Optional[object] = None
    for part in _key_parts(dotted_key):
        field = model.model_fields.get(part) if model is not None else None
        if field is None:
            return None
        annotation = field.annotation
        is_section = isinstance(annotation, type) and issubclass(annotation, BaseModel)
        model = annotation if is_section else None
    return annotation


def parse_override_value(raw: str, *, annotation: Optional[object] = None) -> object:
    """
    Parse a command-line override string into a Python value.

    Text fields take the raw string unchanged, so ``0000`` or a single space survive. Other
    values are read as a YAML scalar or flow collection; text that is not valid YAML, or that
    is blank, is kept as given.

    :param raw: Raw override string.
    :type raw: str
    :param annotation: Declared type of the target field, if known.
    :type annotation: object or None
    :return: Parsed value.
    :rtype: object
    """
    raw = str(raw)
    if annotation is str:
        return raw
    stripped = raw.strip()
    if not stripped:
        return raw
    try:
        return yaml.safe_load(stripped)
    except yaml.YAMLError:
        return raw


def parse_dotted_overrides(pairs: Optional[List[str]]) -> Dict[str, object]:
    """
    Parse repeated key=value pairs into a dotted override mapping.

    Each value is parsed against the type of the field its key names.

    :param pairs: Repeated command-line pairs.
    :type pairs: list[str] or None
    :return: Override mapping.
    :rtype: dict[str, object]
    :raises ValueError: If a pair is not key=value.
    """
    overrides: Dict[str, object] = {}
    for item in pairs or []:
        key, separator, raw = item.partition("=")
        if not separator:
            raise ValueError(f"Config values must be key=value (got {item!r})")
        key = key.strip()
        if not key:
            raise ValueError("Config keys must be non-empty")
        overrides[key] = parse_override_value(raw, annotation=override_annotation(key))
    return overrides


def apply_dotted_overrides(
    config: Mapping[str, object], overrides: Mapping[str, object]
) -> Dict[str, object]:
    """
    Apply dotted key overrides to a nested configuration mapping.

    :param config: Base configuration mapping.
    :type config: Mapping[str, object]
    :param overrides: Dotted key override mapping.
    :type overrides: Mapping[str, object]
    :return: New configuration mapping with overrides applied.
    :rtype: dict[str, object]
    """
    updated: Dict[str, object] = copy.deepcopy(dict(config))
    for dotted_key, value in overrides.items():
        *sections, leaf = _key_parts(dotted_key)
        section = updated
        for name in sections:
            if not isinstance(section.get(name), dict):
                section[name] = {}
            section = section[name]
        section[leaf] = value
    return updated


def _deep_merge(base: Dict[str, object], layer: Mapping[str, object]) -> Dict[str, object]:
    merged = dict(base)
    for key, value in layer.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            merged[key] = _deep_merge(existing, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_configuration_view(
    configuration_paths: Iterable[str],
    *,
    configuration_label: str = "Configuration",
) -> Dict[str, object]:
    """
    Load a composed configuration view from one or more YAML files.

    Later files take precedence; nested mappings are merged key by key.

    :param configuration_paths: Iterable of configuration file paths in precedence order.
    :type configuration_paths: Iterable[str]
    :param configuration_label: Label used in error messages (for example: "Configuration file").
    :type configuration_label: str
    :return: Composed configuration view.
    :rtype: dict[str, object]
    :raises FileNotFoundError: If any configuration file is missing.
    :raises ValueError: If any configuration file is not a mapping/object or is not valid YAML.
    """
    view: Dict[str, object] = {}
    for raw in configuration_paths:
        candidate = Path(raw)
        if not candidate.is_file():
            raise FileNotFoundError(f"{configuration_label} not found: {candidate}")
        try:
            loaded = yaml.safe_load(candidate.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"{configuration_label} is not valid YAML: {candidate}") from exc
        if loaded is None:
            continue
        if not isinstance(loaded, dict):
            raise ValueError(f"{configuration_label} must be a mapping/object: {candidate}")
        view = _deep_merge(view, loaded)
    return view


def load_configuration(
    configuration_paths: Optional[Iterable[str]] = None,
    *,
    overrides: Optional[Mapping[str, object]] = None,
) -> MarkovGraphConfiguration:
    """
    Load and validate a markovgraph configuration.

    :param configuration_paths: Optional YAML files in precedence order.
    :type configuration_paths: Iterable[str] or None
    :param overrides: Optional dotted key overrides applied last.
    :type overrides: Mapping[str, object] or None
    :return: Validated configuration.
    :rtype: MarkovGraphConfiguration
    :raises pydantic.ValidationError: If the composed configuration is invalid.
    """
    view = load_configuration_view(configuration_paths or [], configuration_label="Configuration file")
    view = apply_dotted_overrides(view, overrides or {})
    return MarkovGraphConfiguration.model_validate(view)
