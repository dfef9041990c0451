"""Utilities for loading local (gitignored) GitHub credentials for Travis auth."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_SECRETS_FILENAME = "local_secrets.json"


def _default_secrets_path() -> Path:
    root = Path(__file__).resolve().parents[1]
    return root / DEFAULT_SECRETS_FILENAME


def load_local_secrets(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load `github_token` / `github_user` style secrets from JSON; {} when unavailable."""

    candidate = path or os.getenv("LOCAL_SECRETS_FILE") or _default_secrets_path()
    secrets_path = Path(candidate).expanduser()
    if not secrets_path.exists():
        return {}
    try:
        with secrets_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        print(f"[warn] could not read secrets from {secrets_path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def secret_value(secrets: Dict[str, Any], key: str) -> Optional[str]:
    """Return a non-empty string secret or None."""

    value = secrets.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


__all__ = ["load_local_secrets", "secret_value", "DEFAULT_SECRETS_FILENAME"]
