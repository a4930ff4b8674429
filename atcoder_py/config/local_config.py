"""Local configuration management (.atcoder_py.local)."""

import json
from pathlib import Path
from typing import Optional
from dataclasses import dataclass


FILE_NAME = ".atcoder_py.local"


@dataclass
class LocalConfig:
    """
    Per-directory settings.
    Stored at .atcoder_py.local in the contest working directory.
    """

    contest_id: str = ""
    language: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Optional["LocalConfig"]:
        """
        Load local config from file.
        If path is not specified, searches upward from current directory.
        """
        if path is None:
            path = cls.find_config()

        if path is None or not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                return cls(
                    contest_id=data.get("contest_id", ""),
                    language=data.get("language"),
                )
        except (json.JSONDecodeError, IOError, TypeError, AttributeError):
            return None

    def save(self, path: Optional[Path] = None) -> None:
        """Save local config to file."""
        if path is None:
            path = Path.cwd() / FILE_NAME

        data = {"contest_id": self.contest_id}
        if self.language:
            data["language"] = self.language

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    @staticmethod
    def find_config(start: Optional[Path] = None) -> Optional[Path]:
        """
        Search for .atcoder_py.local starting from `start` (default: current
        directory), walking up to root.
        """
        current = start or Path.cwd()

        while True:
            config_path = current / FILE_NAME
            if config_path.exists():
                return config_path

            # Check if we've reached the root
            if current == current.parent:
                return None

            current = current.parent
