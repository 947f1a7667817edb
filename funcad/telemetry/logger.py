"""Logging helpers shared by the funcad packages.

Library modules only ever obtain loggers through :func:`get_logger`, which has
no side effects: the ``funcad`` logger carries a :class:`logging.NullHandler`
and everything else is left to the host program.  Applications and scripts
that want the bundled console setup call :func:`configure` explicitly.  It
only touches loggers in the ``funcad`` namespace, never the root logger.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

from funcad.utils.config import load_config

NAMESPACE = "funcad"
CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "logging.yaml"

_CONFIG_LOCK = RLock()
_CONFIGURED = False

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "loggers": {
        NAMESPACE: {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        }
    },
}

logging.getLogger(NAMESPACE).addHandler(logging.NullHandler())


def _in_namespace(name: str) -> bool:
    return name == NAMESPACE or name.startswith(NAMESPACE + ".")


def _scoped(data: Mapping[str, Any]) -> dict[str, Any]:
    """Keep the parts of ``data`` that cannot reach outside ``funcad``."""

    scoped: dict[str, Any] = {
        "version": data.get("version", 1),
        "disable_existing_loggers": False,
    }
    for key in ("formatters", "filters", "handlers"):
        if isinstance(data.get(key), Mapping):
            scoped[key] = dict(data[key])
    loggers = data.get("loggers")
    if isinstance(loggers, Mapping):
        scoped["loggers"] = {
            name: spec for name, spec in loggers.items() if _in_namespace(str(name))
        }
    return scoped


def _load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return _scoped(_DEFAULT_CONFIG)
    return _scoped(load_config(path))


def configure(path: Path | None = None, *, force: bool = False) -> None:
    """Install the console logging setup for ``funcad`` loggers.

    Runs once per process unless ``force`` is given.  A ``root`` section in the
    configuration file is ignored.
    """

    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED and not force:
            return
        logging.config.dictConfig(_load_config(path or CONFIG_PATH))
        _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return the ``funcad``-namespaced logger called ``name``."""

    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    if not _in_namespace(name):
        raise ValueError(f"logger name must live under '{NAMESPACE}': {name}")
    return logging.getLogger(name)


__all__ = ["CONFIG_PATH", "NAMESPACE", "configure", "get_logger"]
