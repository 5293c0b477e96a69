"""
Environment-based configuration for the novel scraper.

This module exposes a small, typed configuration surface shared by the
scraping pipeline, the API service and the CLI. All values are sourced from
environment variables; entry points load a local `.env` via python-dotenv
before calling `get_config()`.

The navigation budget has no default: the right value depends on the hosting
environment's execution ceiling, so deployments must set it explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal, Optional

Environment = Literal["local", "dev", "staging", "prod"]
WaitUntil = Literal["domcontentloaded", "networkidle", "load"]

_WAIT_UNTIL_VALUES = {"domcontentloaded", "networkidle", "load"}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Tuned for sandboxed/serverless hosts: no GPU, no sandbox, single process.
DEFAULT_LAUNCH_ARGS = (
    "--disable-gpu",
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--single-process",
    "--no-zygote",
)

DEFAULT_BLOCKED_RESOURCE_TYPES = frozenset({"image", "stylesheet", "font", "media"})


def _bool_env(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or str(default)).strip().lower()
    return raw in ("true", "1", "yes")


def _int_env(name: str, default: Optional[int] = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        if default is None:
            raise ValueError(f"{name} is required")
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ScraperSettings:
    """
    Scraping pipeline configuration: browser launch, budgets, retry policy.

    All budgets are in milliseconds. `navigation_timeout_ms` is required.
    """

    navigation_timeout_ms: int
    total_timeout_ms: int = 25_000
    launch_timeout_ms: int = 10_000
    readiness_timeout_ms: int = 10_000
    wait_until: WaitUntil = "domcontentloaded"

    browser_executable_path: Optional[str] = None
    headless: bool = True
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    viewport_width: int = 1280
    viewport_height: int = 800
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "en-US"
    block_resources: bool = True
    blocked_resource_types: frozenset[str] = field(
        default_factory=lambda: DEFAULT_BLOCKED_RESOURCE_TYPES
    )

    # Caller-side retry (API handler / CLI); 1 means no retry.
    retry_max_attempts: int = 1
    retry_initial_delay_ms: int = 1000
    retry_backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.wait_until not in _WAIT_UNTIL_VALUES:
            raise ValueError(f"Unsupported wait_until value: {self.wait_until!r}")
        if self.retry_backoff_factor < 1.0:
            raise ValueError("retry_backoff_factor must be >= 1.0")

    @classmethod
    def from_env(cls) -> "ScraperSettings":
        """Construct scraper settings from environment variables."""

        backoff_raw = (os.getenv("SCRAPE_RETRY_BACKOFF_FACTOR") or "2.0").strip()
        try:
            backoff = float(backoff_raw)
        except ValueError:
            raise ValueError(
                f"SCRAPE_RETRY_BACKOFF_FACTOR must be a number, got {backoff_raw!r}"
            ) from None

        return cls(
            navigation_timeout_ms=_int_env("SCRAPE_NAVIGATION_TIMEOUT_MS"),
            total_timeout_ms=_int_env("SCRAPE_TOTAL_TIMEOUT_MS", 25_000),
            launch_timeout_ms=_int_env("SCRAPE_LAUNCH_TIMEOUT_MS", 10_000),
            readiness_timeout_ms=_int_env("SCRAPE_READINESS_TIMEOUT_MS", 10_000),
            wait_until=os.getenv("SCRAPE_WAIT_UNTIL", "domcontentloaded").strip().lower(),  # type: ignore[arg-type]
            browser_executable_path=os.getenv("BROWSER_EXECUTABLE_PATH") or None,
            headless=_bool_env("BROWSER_HEADLESS", True),
            launch_args=_csv_env("BROWSER_LAUNCH_ARGS", DEFAULT_LAUNCH_ARGS),
            viewport_width=_int_env("BROWSER_VIEWPORT_WIDTH", 1280),
            viewport_height=_int_env("BROWSER_VIEWPORT_HEIGHT", 800),
            user_agent=os.getenv("BROWSER_USER_AGENT") or DEFAULT_USER_AGENT,
            locale=os.getenv("BROWSER_LOCALE", "en-US"),
            block_resources=_bool_env("BROWSER_BLOCK_RESOURCES", True),
            blocked_resource_types=frozenset(
                t.lower()
                for t in _csv_env(
                    "BROWSER_BLOCKED_RESOURCE_TYPES",
                    tuple(sorted(DEFAULT_BLOCKED_RESOURCE_TYPES)),
                )
            ),
            retry_max_attempts=_int_env("SCRAPE_RETRY_MAX_ATTEMPTS", 1),
            retry_initial_delay_ms=_int_env("SCRAPE_RETRY_INITIAL_DELAY_MS", 1000),
            retry_backoff_factor=backoff,
        )


@dataclass(frozen=True)
class AppConfig:
    """
    Top-level application configuration.

    Cross-cutting concerns (environment, logging) plus the nested scraper
    settings handed to `NovelScraper` at construction.
    """

    environment: Environment
    log_level: str

    # Optional file path for structured JSON logs; when set, logs are written
    # to file (and stdout if log_stdout).
    log_file: Optional[str]
    log_stdout: bool

    scraper: ScraperSettings

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Construct configuration from environment variables.

        Fails fast on unexpected values instead of guessing.
        """

        environment = os.getenv("APP_ENV", "local")
        if environment not in {"local", "dev", "staging", "prod"}:
            raise ValueError(f"Unsupported APP_ENV value: {environment!r}")

        return cls(
            environment=environment,  # type: ignore[arg-type]
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            log_stdout=_bool_env("LOG_STDOUT", True),
            scraper=ScraperSettings.from_env(),
        )


def get_config() -> AppConfig:
    """
    Helper to obtain the current configuration.

    Long-lived processes should construct a single `AppConfig` at startup
    and pass it explicitly through the code.
    """

    return AppConfig.from_env()
