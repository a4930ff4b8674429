"""Global configuration management (~/.atcoder_py.global)."""

import json
import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass


DEFAULT_PATH = Path.home() / ".atcoder_py.global"


def session_file() -> Path:
    """Location of the persisted login cookies."""
    cache_dir = os.environ.get("XDG_CACHE_HOME")
    base = Path(cache_dir) if cache_dir else Path.home() / ".cache"
    return base / "atcoder_py" / "session.json"


@dataclass
class GlobalConfig:
    """
    User-wide settings.
    Stored at ~/.atcoder_py.global
    """

    update_interval: int = 2000
    language: str = "Python"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GlobalConfig":
        """Load global config from file."""
        if path is None:
            path = DEFAULT_PATH

        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                return cls(
                    update_interval=int(data.get("update_interval", 2000)),
                    language=data.get("language", "Python"),
                )
        except (json.JSONDecodeError, IOError, TypeError, ValueError):
            return cls()

    def save(self, path: Optional[Path] = None) -> None:
        """Save global config to file."""
        if path is None:
            path = DEFAULT_PATH

        data = {"update_interval": self.update_interval, "language": self.language}
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
