"""Configuration management."""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class HackerNewsConfig:
    """Hacker News source settings."""
    base_url: str = "https://hacker-news.firebaseio.com/v0"
    batch_limit: int = 50
    min_score: int = 50
    min_comments: int = 10
    keywords: list[str] = field(default_factory=lambda: [
        "AI", "人工智能", "tech", "technology", "programming",
        "coding", "startup", "innovation", "research", "news",
        "development", "software", "hardware", "cloud", "web3",
    ])
    # Evaluated top to bottom, first match wins
    categories: list[dict] = field(default_factory=lambda: [
        {"label": "AI", "keywords": ["ai", "人工智能", "machine learning"]},
        {"label": "Tech News", "keywords": ["tech", "technology", "news"]},
        {"label": "Development", "keywords": ["programming", "coding", "software"]},
        {"label": "Startups", "keywords": ["startup", "innovation", "business"]},
        {"label": "Research", "keywords": ["research", "science", "paper"]},
    ])


@dataclass
class GitHubConfig:
    """GitHub source settings."""
    api_base: str = "https://api.github.com"
    languages: list[str] = field(default_factory=lambda: ["javascript", "python", "java"])
    since: str = "daily"
    per_query_limit: int = 30
    min_query_stars: int = 100
    request_delay: float = 1.0
    min_stars: int = 1000
    keywords: list[str] = field(default_factory=lambda: [
        "AI", "人工智能", "machine learning", "deep learning",
        "framework", "library", "tool", "utility", "cli",
        "web", "mobile", "desktop", "server", "cloud",
    ])
    # Evaluated top to bottom, first match wins
    categories: list[dict] = field(default_factory=lambda: [
        {"label": "Frontend", "keywords": ["react", "vue", "angular", "frontend", "ui", "framework"]},
        {"label": "Backend", "keywords": ["server", "backend", "api", "database", "orm"]},
        {"label": "AI/ML", "keywords": [
            "ai", "machine learning", "deep learning", "tensorflow", "pytorch", "人工智能",
        ]},
        {"label": "Dev Tools", "keywords": ["tool", "utility", "cli", "devops", "docker", "kubernetes"]},
        {"label": "Mobile", "keywords": ["mobile", "android", "ios", "flutter", "react native"]},
    ])


@dataclass
class CacheConfig:
    """Result cache settings."""
    ttl_minutes: float = 30


@dataclass
class ReportConfig:
    """Pipeline output and report settings."""
    display_cap: int = 20
    text_items_per_category: int = 3
    html_items_per_category: int = 5
    text_title_limit: int = 60
    html_title_limit: int = 80


@dataclass
class Settings:
    """Application settings."""

    # API keys (from environment only)
    github_token: Optional[str] = None

    # Config sections
    hackernews: HackerNewsConfig = field(default_factory=HackerNewsConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    reports: ReportConfig = field(default_factory=ReportConfig)

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache.ttl_minutes)

    @property
    def github_batch_limit(self) -> int:
        return len(self.github.languages) * self.github.per_query_limit


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    # GITHUB_API_KEY is the older variable name
    github_token = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_API_KEY") or None

    settings = Settings(github_token=github_token)

    # Apply YAML config section by section
    for section in ("hackernews", "github", "cache", "reports"):
        values = config.get(section) or {}
        target = getattr(settings, section)
        for key, value in values.items():
            if not hasattr(target, key):
                raise ValueError(f"Unknown setting: {section}.{key}")
            setattr(target, key, value)

    return settings
