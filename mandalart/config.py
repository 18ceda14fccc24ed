"""Configuration for the Mandalart planner."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mandalart.errors import ConfigError
from mandalart.messages import DEFAULT_LOCALE, resolve_locale

PROVIDERS = ("openrouter", "anthropic")
BACKENDS = ("sqlite", "local")

DEFAULT_HOME = Path.home() / ".mandalart"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "z-ai/glm-4.5-air:free"


def env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def db_path_from_url(database_url: str) -> Path:
    """Turn DATABASE_URL (``sqlite:///path`` or a plain path) into a file path."""
    if database_url.startswith("sqlite:///"):
        return Path(database_url[len("sqlite:///"):])
    if "://" in database_url:
        raise ConfigError(
            f"Unsupported DATABASE_URL scheme: {database_url.split('://')[0]}",
            problems=["DATABASE_URL must be sqlite:///<path> or a file path"],
        )
    return Path(database_url)


@dataclass
class AppConfig:
    """Runtime configuration."""

    # Generation
    provider: str = "openrouter"
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_OPENROUTER_BASE_URL
    generation_timeout: float = 120.0  # seconds, passed to the SDK client

    # Persistence
    backend: str = "sqlite"
    database_url: Optional[str] = None
    home_dir: Path = field(default_factory=lambda: DEFAULT_HOME)

    # Sessions
    jwt_secret: Optional[str] = None
    token_ttl_days: int = 7

    # Presentation
    locale: str = DEFAULT_LOCALE
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        provider = os.environ.get("MANDALART_PROVIDER", "openrouter").lower()
        if provider == "anthropic":
            api_key = os.environ.get("ANTHROPIC_API_KEY")
            model = os.environ.get("ANTHROPIC_MODEL_NAME", "claude-haiku-4-5-20251001")
        else:
            api_key = os.environ.get("OPENROUTER_API_KEY")
            model = os.environ.get("OPENROUTER_MODEL_NAME", "")
        home = os.environ.get("MANDALART_HOME")
        return cls(
            provider=provider,
            api_key=api_key,
            model=model,
            base_url=os.environ.get("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL),
            generation_timeout=float(os.environ.get("GENERATION_TIMEOUT_SECONDS", 120)),
            backend=os.environ.get("MANDALART_BACKEND", "sqlite").lower(),
            database_url=os.environ.get("DATABASE_URL"),
            home_dir=Path(home) if home else DEFAULT_HOME,
            jwt_secret=os.environ.get("JWT_SECRET"),
            token_ttl_days=int(os.environ.get("TOKEN_TTL_DAYS", 7)),
            locale=resolve_locale(os.environ.get("MANDALART_LOCALE", DEFAULT_LOCALE)),
            debug=env_flag("MANDALART_DEBUG"),
        )

    @property
    def db_path(self) -> Path:
        if self.database_url:
            return db_path_from_url(self.database_url)
        return self.home_dir / "mandalart.db"

    def validate(self, require_generation: bool = True) -> "AppConfig":
        """Check required settings, raising ConfigError listing every problem."""
        problems = []

        if self.provider not in PROVIDERS:
            problems.append(f"MANDALART_PROVIDER must be one of {', '.join(PROVIDERS)}")
        if self.backend not in BACKENDS:
            problems.append(f"MANDALART_BACKEND must be one of {', '.join(BACKENDS)}")

        if require_generation:
            key_var = "ANTHROPIC_API_KEY" if self.provider == "anthropic" else "OPENROUTER_API_KEY"
            if not self.api_key:
                problems.append(f"{key_var} is required")
            if not self.model:
                problems.append("OPENROUTER_MODEL_NAME is required")

        if self.backend == "sqlite":
            if not self.database_url:
                problems.append("DATABASE_URL is required for the sqlite backend")
            else:
                try:
                    db_path_from_url(self.database_url)
                except ConfigError as e:
                    problems.extend(e.problems)
            if not self.jwt_secret:
                problems.append("JWT_SECRET is required for the sqlite backend")

        if self.token_ttl_days <= 0:
            problems.append("TOKEN_TTL_DAYS must be positive")

        if problems:
            raise ConfigError(
                "Configuration errors:\n" + "\n".join(f"  - {p}" for p in problems),
                problems=problems,
            )
        return self

    def display(self) -> str:
        """Display configuration (secrets masked)."""
        return f"""
Mandalart Configuration
=======================
Provider: {self.provider}
Model: {self.model or '(unset)'}
API key: {'set' if self.api_key else '(unset)'}
Backend: {self.backend}
Database: {self.db_path if self.backend == 'sqlite' else '(local store)'}
Home: {self.home_dir}
JWT secret: {'set' if self.jwt_secret else '(unset)'}
Locale: {self.locale}
Debug: {self.debug}
=======================
"""
