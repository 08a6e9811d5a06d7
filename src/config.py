"""Startup configuration file loading and validation.

A configuration file (YAML or JSON, ``dependencies.yml`` by default) lists
the directives of one startup pass:

    framework:
      root: ./framework
      prefix: frameboot
    load_path: [lib]
    requirements: requirements.txt
    dependencies:
      - RedCloth
      - json_pure: ">= 1.1"
    optional: [hpricot]
    orm: datamapper
    test: rspec
    templates: [haml]
    index_hints: false
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requirements
import yaml
from jsonschema import Draft7Validator

from constants import Constants
from resolution.errors import ConfigurationError

logger = logging.getLogger(__name__)

_DECLARATIONS = {
    "oneOf": [
        {"type": "string"},
        {"type": "object", "additionalProperties": {"type": ["string", "number", "array", "null"]}},
        {"type": "array"},
    ]
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "framework": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "root": {"type": ["string", "null"]},
                "prefix": {"type": "string"},
                "namespace": {"type": "string"},
            },
        },
        "load_path": {"type": "array", "items": {"type": "string"}},
        "requirements": {"type": "string"},
        "dependencies": _DECLARATIONS,
        "optional": _DECLARATIONS,
        "orm": {"type": "string"},
        "test": {"type": "string"},
        "templates": {"type": "array", "items": {"type": "string"}},
        "index_hints": {"type": "boolean"},
    },
}


@dataclass
class StartupConfig:
    """Directives for one startup pass, in evaluation order."""
    framework_root: Optional[str] = None
    framework_prefix: Optional[str] = None
    plugin_namespace: Optional[str] = None
    load_path: List[str] = field(default_factory=list)
    requirements_file: Optional[str] = None
    dependencies: List[Any] = field(default_factory=list)
    optional: List[Any] = field(default_factory=list)
    orm: Optional[str] = None
    test: Optional[str] = None
    templates: List[str] = field(default_factory=list)
    index_hints: bool = False
    base_dir: str = "."

    def resolve_path(self, path: str) -> str:
        """Make ``path`` absolute relative to the config file's directory."""
        path = os.path.expanduser(path)
        return path if os.path.isabs(path) else os.path.normpath(os.path.join(self.base_dir, path))


def validate_config(data: Dict[str, Any]) -> None:
    """Validate raw config data and raise on the first error.

    Raises:
        ConfigurationError: describing the offending path.
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    errs = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise ConfigurationError(f"Invalid config at '{path}': {first.message}")


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def config_from_dict(data: Optional[Dict[str, Any]], base_dir: str = ".") -> StartupConfig:
    """Build a StartupConfig from already-parsed data."""
    data = data or {}
    validate_config(data)
    framework = data.get("framework") or {}
    return StartupConfig(
        framework_root=framework.get("root"),
        framework_prefix=framework.get("prefix"),
        plugin_namespace=framework.get("namespace"),
        load_path=list(data.get("load_path") or []),
        requirements_file=data.get("requirements"),
        dependencies=_as_list(data.get("dependencies")),
        optional=_as_list(data.get("optional")),
        orm=data.get("orm"),
        test=data.get("test"),
        templates=list(data.get("templates") or []),
        index_hints=bool(data.get("index_hints", False)),
        base_dir=base_dir,
    )


def load_config(path: str) -> StartupConfig:
    """Load and validate a YAML or JSON config file.

    Raises:
        OSError: when the file cannot be read.
        ConfigurationError: when it cannot be parsed or fails validation.
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not parse {path}: {e}") from e
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    logger.debug("Loaded config from %s", path)
    return config_from_dict(data, base_dir=os.path.dirname(os.path.abspath(path)))


def find_config(directory: str = ".") -> Optional[str]:
    """Return the first default config file present in ``directory``."""
    for name in Constants.CONFIG_FILES:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate
    return None


def parse_requirements_file(path: str) -> List[Dict[str, Any]]:
    """Read a requirements.txt into ``{name: constraint}`` declarations.

    Entries without a project name (bare URLs, local paths) are skipped.

    Raises:
        OSError: when the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as fh:
        body = fh.read()
    declarations: List[Dict[str, Any]] = []
    for req in requirements.parse(body):
        if not req.name:
            logger.warning("Skipping requirement without a name: %s", getattr(req, "line", req))
            continue
        specs = [f"{op}{version}" for op, version in (req.specs or [])]
        declarations.append({req.name: specs or None})
    return declarations
