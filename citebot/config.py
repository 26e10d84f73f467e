"""Configuration management.

``Settings`` is a **metaclass-based singleton**: the first call to
``Settings.load()`` creates the instance; every later call returns
the same object.  Use ``update()`` to change values at runtime (the CLI
does this for its flags), or ``reload()`` to re-read everything from disk.

User-editable configuration lives in ``.metadata/settings.yaml`` under the
working directory.  On first run a missing file is copied from
``.metadata.example/``.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from citebot.services.fetcher import DEFAULT_TIMEOUT
from citebot.services.scholar_service import SCHOLAR_SEARCH_URL

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.yaml"


# ---------------------------------------------------------------------------
# Singleton metaclass
# ---------------------------------------------------------------------------

class _SettingsMeta(type):
    """Metaclass that enforces a process-wide singleton for *Settings*.

    * First ``Settings(...)`` creates and caches the instance.
    * Later ``Settings(...)`` calls return the cached instance (args ignored).
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


# ---------------------------------------------------------------------------
# Settings dataclass (singleton)
# ---------------------------------------------------------------------------

@dataclass
class Settings(metaclass=_SettingsMeta):
    """Application settings: a singleton with runtime-mutable values.

    Usage::

        settings = Settings.load()              # first call → create
        settings = Settings.load()              # later → same object
        settings.update(db_path=Path("x.db"))   # runtime change
        settings = Settings.reload()            # re-read from disk
    """

    db_path: Path = Path("paper_cache.db")
    metadata_dir: Path = Path(".metadata")

    # Fetching
    request_timeout: float = DEFAULT_TIMEOUT
    request_delay: float = 2.0
    scholar_search_url: str = SCHOLAR_SEARCH_URL
    debug: bool = False

    # Web view
    host: str = "127.0.0.1"
    port: int = 8080
    page_size: int = 25

    # ── Runtime helpers ───────────────────────────────────────────────

    def update(self, **kwargs: Any) -> None:
        """Mutate settings fields at runtime.

        >>> Settings.load().update(db_path=Path("/tmp/test.db"))
        """
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no field '{key}'")
            setattr(self, key, value)

    # ── Factory / lifecycle ───────────────────────────────────────────

    @classmethod
    def load(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Load or return the singleton Settings instance.

        On first call the singleton is created; subsequent calls return
        the cached instance.  Pass *base_dir* to override the directory
        holding ``.metadata/`` (defaults to the working directory).
        """
        if cls in _SettingsMeta._instances:
            return _SettingsMeta._instances[cls]  # type: ignore[return-value]

        if base_dir is None:
            base_dir = Path.cwd()

        metadata_dir = base_dir / ".metadata"
        cls._ensure_default_files(base_dir, metadata_dir)

        values = _load_settings_file(metadata_dir / SETTINGS_FILE)
        db_path = Path(values.pop("db_path", "paper_cache.db"))
        if not db_path.is_absolute():
            db_path = base_dir / db_path

        return cls(db_path=db_path, metadata_dir=metadata_dir, **values)

    @classmethod
    def reload(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Discard the current singleton and re-load from disk."""
        cls.reset()
        return cls.load(base_dir)

    @classmethod
    def reset(cls) -> None:
        """Discard the singleton so the next ``load()`` re-creates it."""
        _SettingsMeta._instances.pop(cls, None)

    # ── Private ───────────────────────────────────────────────────────

    @staticmethod
    def _ensure_default_files(base_dir: Path, metadata_dir: Path) -> None:
        """Copy ``.metadata.example/`` templates when real files are missing."""
        example_dir = base_dir / ".metadata.example"
        if not example_dir.exists():
            return

        metadata_dir.mkdir(parents=True, exist_ok=True)
        for example_file in example_dir.iterdir():
            if example_file.is_file():
                target = metadata_dir / example_file.name
                if not target.exists():
                    shutil.copy2(example_file, target)
                    logger.info("Created .metadata/%s from template", example_file.name)


# ---------------------------------------------------------------------------
# YAML loader
# ---------------------------------------------------------------------------

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _to_bool(value: Any) -> bool:
    """Strict boolean: YAML booleans, 0/1, or true/false style words."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"Not a boolean: {value!r}")


_FIELD_TYPES = {
    "db_path": str,
    "request_timeout": float,
    "request_delay": float,
    "scholar_search_url": str,
    "debug": _to_bool,
    "host": str,
    "port": int,
    "page_size": int,
}


def _load_settings_file(path: Path) -> dict[str, Any]:
    """Read ``settings.yaml`` and keep only known, well-typed keys.

    A missing or unreadable file gives an empty dict, so defaults apply.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        return {}

    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in _FIELD_TYPES or value is None:
            continue
        try:
            values[key] = _FIELD_TYPES[key](value)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for '%s' in %s", key, path)
    return values
