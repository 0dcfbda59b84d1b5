"""
Configuration for the translation store.

Defaults live in code. A YAML file may override any of them:

    storage_key: formTranslations
    missing_translation: No Available translation
    autosave: true
    storage_path: translations.json
    retry:
      attempts: 3
      initial_delay: 0.1
      backoff: 2.0
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "formTranslations"
NO_TRANSLATION = "No Available translation"


class ConfigError(Exception):
    """Raised when a configuration value has the wrong type or range."""
    pass


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff for storage writes.

    Properties:
        attempts: Total write attempts, first one included (>= 1)
        initial_delay: Seconds to wait before the second attempt
        backoff: Multiplier applied to the delay after each failed attempt
    """

    attempts: int = 3
    initial_delay: float = 0.1
    backoff: float = 2.0

    def delays(self) -> Iterator[float]:
        """Waits between consecutive attempts (attempts - 1 values)."""
        delay = self.initial_delay
        for _ in range(self.attempts - 1):
            yield delay
            delay *= self.backoff


@dataclass(frozen=True)
class StoreConfig:
    """
    Settings of a TranslationStore.

    Properties:
        storage_key: Storage key holding the whole translation collection
        missing_translation: Value returned by lookups that find nothing
        autosave: Persist after every upsert
        retry: Write retry policy
        storage_path: File used by JsonFileStorage (None for in-memory use)
    """

    storage_key: str = DEFAULT_STORAGE_KEY
    missing_translation: str = NO_TRANSLATION
    autosave: bool = True
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    storage_path: Optional[str] = None


def _check(name: str, value: Any, expected: type) -> Any:
    # bool is an int subclass; do not let True pass as a count
    if isinstance(value, bool) and expected is not bool:
        raise ConfigError(f"'{name}' must be {expected.__name__}, got bool")
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise ConfigError(f"'{name}' must be {expected.__name__}, got {type(value).__name__}")
    return value


def retry_from_dict(d: Dict[str, Any]) -> RetryPolicy:
    attempts = _check("retry.attempts", d.get("attempts", 3), int)
    initial_delay = _check("retry.initial_delay", d.get("initial_delay", 0.1), float)
    backoff = _check("retry.backoff", d.get("backoff", 2.0), float)
    if attempts < 1:
        raise ConfigError("'retry.attempts' must be at least 1")
    if initial_delay < 0 or backoff < 1:
        raise ConfigError("'retry.initial_delay' must be >= 0 and 'retry.backoff' >= 1")
    return RetryPolicy(attempts=attempts, initial_delay=initial_delay, backoff=backoff)


def config_from_dict(d: Dict[str, Any]) -> StoreConfig:
    known = {f.name for f in fields(StoreConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        warnings.warn(f"Ignoring unknown config keys: {unknown}", UserWarning)

    defaults = StoreConfig()
    storage_path = d.get("storage_path", defaults.storage_path)
    if storage_path is not None:
        storage_path = str(_check("storage_path", storage_path, str))
    retry = d.get("retry")
    return StoreConfig(
        storage_key=_check("storage_key", d.get("storage_key", defaults.storage_key), str),
        missing_translation=_check(
            "missing_translation", d.get("missing_translation", defaults.missing_translation), str
        ),
        autosave=_check("autosave", d.get("autosave", defaults.autosave), bool),
        retry=retry_from_dict(_check("retry", retry, dict)) if retry is not None else defaults.retry,
        storage_path=storage_path,
    )


def load_config(path: Union[str, Path, None] = None) -> StoreConfig:
    """
    Load a StoreConfig from a YAML file.

    A missing path, missing file, or unparseable file yields the defaults.

    Raises:
        ConfigError: If the file parses but holds values of the wrong type
    """
    if path is None:
        return StoreConfig()
    path = Path(path)
    if not path.exists():
        return StoreConfig()
    try:
        d = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Using default store config, cannot read %s: %s", path, e)
        return StoreConfig()
    if d is None:
        return StoreConfig()
    if not isinstance(d, dict):
        logger.warning("Using default store config, %s does not hold a mapping", path)
        return StoreConfig()
    return config_from_dict(d)
