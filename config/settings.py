"""
Configuration settings for the Wooly fabric scoring service.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")


@dataclass
class ScraperConfig:
    """Configuration for the composition scrapers."""

    # Zara product API (structured composition)
    zara_api_url: str = "https://www.zara.com/itxrest/2/catalog/store/11719/product/{product_id}"
    zara_referer: str = "https://www.zara.com/us/en/"

    # Browser settings
    headless: bool = True  # Set to False for debugging
    browser_type: str = "firefox"  # "firefox", "chromium", or "webkit"
    viewport_width: int = 1920
    viewport_height: int = 1080
    timeout_ms: int = 30000
    dynamic_content_wait_seconds: float = 1.5  # Extra wait after load for accordions

    # HTTP settings
    request_timeout_seconds: float = 10.0

    # User agents to rotate
    user_agents: list = field(
        default_factory=lambda: [
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
        ]
    )


@dataclass
class QueueConfig:
    """Configuration for the single-flight scrape queue and its URL cache."""

    cache_ttl_seconds: float = 15 * 60
    settle_seconds: float = 2.0  # Delay between dequeues (be respectful)
    scrape_timeout_seconds: float = 10.0  # Abandon a scrape after this long


@dataclass
class AIConfig:
    """Configuration for the recommendation / chat service."""

    api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    chat_model: str = field(
        default_factory=lambda: os.getenv("OPENAI_CHAT_MODEL", "gpt-3.5-turbo")
    )
    timeout_seconds: float = 60.0

    recommendation_max_tokens: int = 250
    recommendation_temperature: float = 0.7
    search_query_max_tokens: int = 20
    search_query_temperature: float = 0.5
    chat_max_tokens: int = 200
    chat_temperature: float = 0.7


@dataclass
class ServerConfig:
    """Configuration for the HTTP backend."""

    host: str = "127.0.0.1"
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    max_content_length: int = 2 * 1024 * 1024  # 2 MB request limit
    cors_origins: str = "*"  # Restrict to the extension ID in production


@dataclass
class LoggingConfig:
    """Configuration for console output."""

    verbose: bool = field(default_factory=lambda: os.getenv("WOOLY_VERBOSE", "") == "1")


@dataclass
class AppConfig:
    """Main configuration combining all settings."""

    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Default configuration instance
config = AppConfig()
