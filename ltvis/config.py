# config.py

from __future__ import annotations

import copy
import json
import os
from typing import Any

import yaml


class Config:
    """Global configuration for sessions, playback and the command line.

    Attributes
    ----------
    playback:
        ``base_delay_ms`` is the pause between auto-played steps at speed
        ``1.0``; ``min_speed`` is the lower clamp applied by ``set_speed``;
        ``speed`` is the multiplier new controllers start with.
    logging:
        ``level``, ``format`` and optional ``file`` passed to
        :func:`logging.basicConfig` by the CLI.
    stream:
        ``version`` stamped into msgpack stream messages.
    project:
        ``version`` written into saved project files.
    config_file:
        Absolute path of the last file loaded with :meth:`load_from_file`.
    """

    playback = {"base_delay_ms": 200, "min_speed": 0.1, "speed": 1.0}
    logging = {
        "level": "INFO",
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "file": None,
    }
    stream = {"version": 1}
    project = {"version": "1.0"}
    config_file: str | None = None

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Load configuration values from a JSON or YAML file.

        Only keys that already exist as attributes on ``Config`` are
        assigned. Nested dictionaries are merged recursively when the existing
        attribute is also a ``dict``.

        Parameters
        ----------
        path:
            Path to a ``.json``, ``.yaml`` or ``.yml`` file.
        """

        data = _read_mapping(path)
        cls.config_file = os.path.abspath(path)
        for key, value in data.items():
            if key.startswith("_") or not hasattr(cls, key):
                continue
            current = getattr(cls, key)
            if callable(current):
                continue
            if isinstance(current, dict) and isinstance(value, dict):
                _deep_update(current, value)
            else:
                setattr(cls, key, value)

    @classmethod
    def snapshot(cls) -> dict[str, Any]:
        """Return a deep copy of every public setting."""
        return {
            key: copy.deepcopy(value)
            for key, value in vars(cls).items()
            if not key.startswith("_")
            and not isinstance(value, (classmethod, staticmethod))
            and not callable(value)
        }

    @classmethod
    def restore(cls, data: dict[str, Any]) -> None:
        """Reset settings to ``data`` as returned by :meth:`snapshot`."""
        for key, value in data.items():
            setattr(cls, key, copy.deepcopy(value))


def _deep_update(target: dict, values: dict) -> None:
    for key, value in values.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _deep_update(target[key], value)
        else:
            target[key] = value


def _read_mapping(path: str) -> dict[str, Any]:
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, encoding="utf-8") as fh:
        if path.endswith((".yaml", ".yml")):
            data = yaml.safe_load(fh) or {}
        else:
            data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data


def load_config(path: str) -> dict[str, Any]:
    """Load configuration from ``path`` into :class:`Config` and return the data."""
    Config.load_from_file(path)
    return _read_mapping(path)
