"""Configuration loader for database, encryption, and logging settings."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

from salesdesk_app.core.crypto import CryptoService


@dataclass(frozen=True)
class DatabaseConfig:
    path: str


@dataclass(frozen=True)
class EncryptionConfig:
    key_env: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    file: str | None


@dataclass(frozen=True)
class AppConfig:
    database: DatabaseConfig
    encryption: EncryptionConfig
    logging: LoggingConfig


DEFAULT_CONFIG_REL_PATH = Path("config/salesdesk.yaml")
DEFAULT_ENCRYPTION_KEY_ENV = "SALESDESK_ENCRYPTION_KEY"
RUNTIME_ENV_REL_PATH = Path("config/runtime.env")
_RUNTIME_ENV_LOADED = False


def _split_key_value(raw_line: str) -> tuple[str, str] | None:
    """Parse a shell or PowerShell key assignment line."""
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith("$env:"):
        line = line[len("$env:") :]
    elif line.startswith("export "):
        line = line[len("export ") :]

    if "=" not in line:
        return None

    key, value = line.split("=", 1)
    key = key.strip()
    value = value.strip()
    if not key:
        return None

    if (value.startswith("'") and value.endswith("'")) or (
        value.startswith('"') and value.endswith('"')
    ):
        value = value[1:-1]

    return key, value


def _runtime_root() -> Path:
    """Return writable root for runtime env creation."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[3]


def _iter_env_candidates() -> list[Path]:
    """Return candidate files that may contain runtime keys."""
    roots: list[Path] = [Path.cwd(), _runtime_root()]

    unique: list[Path] = []
    seen: set[Path] = set()
    for root in roots:
        for path in (root / ".env.local", root / RUNTIME_ENV_REL_PATH):
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            unique.append(resolved)
    return unique


def _load_env_from_file(path: Path) -> None:
    """Load KEY=VALUE lines from a local file into process environment."""
    if not path.is_file():
        return
    with path.open("r", encoding="utf-8") as file:
        for line in file:
            parsed = _split_key_value(line)
            if not parsed:
                continue
            key, value = parsed
            if key not in os.environ:
                os.environ[key] = value


def _ensure_runtime_env_loaded() -> None:
    """Load local env files once per process."""
    global _RUNTIME_ENV_LOADED
    if _RUNTIME_ENV_LOADED:
        return
    for path in _iter_env_candidates():
        _load_env_from_file(path)
    _RUNTIME_ENV_LOADED = True


def _resolve_db_path(db_path: str) -> Path:
    path = Path(db_path)
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def ensure_encryption_key(key_env: str, db_path: str | None = None) -> str:
    """Return the encryption key, generating and persisting one on first run.

    A database without a key source is unreadable, so generation is refused
    when the configured database file already exists.
    """
    _ensure_runtime_env_loaded()
    value = os.getenv(key_env)
    if value:
        return value

    runtime_env = _runtime_root() / RUNTIME_ENV_REL_PATH
    if db_path and _resolve_db_path(db_path).exists():
        raise RuntimeError(
            "Runtime key file is missing while database file exists. "
            f"Restore {runtime_env} or set {key_env}."
        )

    value = CryptoService.generate_base64_key()
    os.environ[key_env] = value
    runtime_env.parent.mkdir(parents=True, exist_ok=True)
    with runtime_env.open("a", encoding="utf-8") as file:
        file.write(f"{key_env}='{value}'\n")
    return value


def resolve_default_config_path() -> Path:
    """Resolve configuration path for source and packaged execution."""
    env_path = os.getenv("SALESDESK_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    candidates: list[Path] = []
    if getattr(sys, "frozen", False):
        candidates.append(Path(sys.executable).resolve().parent / DEFAULT_CONFIG_REL_PATH)
    candidates.append(Path.cwd() / DEFAULT_CONFIG_REL_PATH)
    candidates.append(Path(__file__).resolve().parents[3] / DEFAULT_CONFIG_REL_PATH)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the app configuration from YAML."""
    path = config_path or resolve_default_config_path()
    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file) or {}

    logging_raw = raw.get("logging") or {}
    return AppConfig(
        database=DatabaseConfig(path=str(raw["db"]["path"])),
        encryption=EncryptionConfig(
            key_env=str(raw.get("encryption", {}).get("key_env", DEFAULT_ENCRYPTION_KEY_ENV)),
        ),
        logging=LoggingConfig(
            level=str(logging_raw.get("level", "INFO")).upper(),
            file=logging_raw.get("file") or None,
        ),
    )
