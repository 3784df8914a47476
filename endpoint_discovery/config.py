"""Discovery configuration: defaults, environment variables and config files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import yaml

from .crud import DEFAULT_CRUD_SLOTS, DEFAULT_SQL_CONNECT_SLOTS


def _split(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass
class DiscoveryConfig:
    """
    Discovery configuration with sensible defaults.
    Can be loaded from environment variables, config file, or CLI args.
    """
    # Where endpoint files live; routes are relative to root_folder
    root_folder: str = "."
    start_folder: str = "modules"
    namespace: str = "magic"

    # Reserved slot names recognized by the classifier
    crud_slots: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_CRUD_SLOTS)
    sql_connect_slots: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_SQL_CONNECT_SLOTS)

    timeout_seconds: float = 0  # 0 disables the deadline
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "DiscoveryConfig":
        """Load configuration from environment variables."""
        return cls(
            root_folder=os.getenv("DISCOVERY_ROOT", "."),
            start_folder=os.getenv("DISCOVERY_START_FOLDER", "modules"),
            namespace=os.getenv("DISCOVERY_NAMESPACE", "magic"),
            crud_slots=_split(os.getenv("DISCOVERY_CRUD_SLOTS", ",".join(DEFAULT_CRUD_SLOTS))),
            sql_connect_slots=_split(os.getenv("DISCOVERY_SQL_SLOTS", ",".join(DEFAULT_SQL_CONNECT_SLOTS))),
            timeout_seconds=float(os.getenv("DISCOVERY_TIMEOUT", 0)),
            encoding=os.getenv("DISCOVERY_ENCODING", "utf-8"),
        )

    @classmethod
    def from_file(cls, path: str) -> "DiscoveryConfig":
        """Load configuration from JSON or YAML file."""
        with open(path, "r") as f:
            if path.endswith((".yaml", ".yml")):
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML in {path}: {e}") from e
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping of settings, got {type(data).__name__}")
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

        for key in ("crud_slots", "sql_connect_slots"):
            if isinstance(data.get(key), str):
                data[key] = _split(data[key])
            elif isinstance(data.get(key), list):
                data[key] = tuple(data[key])

        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_folder": self.root_folder,
            "start_folder": self.start_folder,
            "namespace": self.namespace,
            "crud_slots": list(self.crud_slots),
            "sql_connect_slots": list(self.sql_connect_slots),
            "timeout_seconds": self.timeout_seconds,
            "encoding": self.encoding,
        }
