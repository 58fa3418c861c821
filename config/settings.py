"""
Settings Configuration
Pydantic-based configuration for sources, aggregation and enrichment
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class NewsSettings(BaseSettings):
    """Article search API (NewsAPI compatible)"""
    api_key: Optional[str] = Field(default=None, description="News API key")
    base_url: str = Field(default="https://newsapi.org/v2", description="API base URL")
    page_size: int = Field(default=15, description="Articles per request")
    language: str = Field(default="en", description="Article language")
    timeout_sec: float = Field(default=8.0, description="Per-source deadline (seconds)")

    class Config:
        env_prefix = "NEWS_"


class DiscussionSettings(BaseSettings):
    """Discussion search API (Reddit public search)"""
    base_url: str = Field(default="https://www.reddit.com", description="API base URL")
    subreddits: List[str] = Field(
        default_factory=lambda: ["worldnews", "news", "weather", "TropicalWeather", "Earthquakes"],
        description="Subreddits searched",
    )
    page_size: int = Field(default=25, description="Posts per request")
    user_agent: str = Field(default="CrisisPipeline/1.0", description="User Agent")
    timeout_sec: float = Field(default=6.0, description="Per-source deadline (seconds)")

    class Config:
        env_prefix = "DISCUSSION_"


class AggregatorSettings(BaseSettings):
    """Aggregation settings"""
    max_results: int = Field(default=20, description="Items kept after ranking")
    fixture_fallback_enabled: bool = Field(
        default=True,
        description="Fall back to fixture data when every live source fails",
    )

    class Config:
        env_prefix = "AGGREGATOR_"


class EnrichmentSettings(BaseSettings):
    """Enrichment queue settings"""
    rate_limit: int = Field(default=3, description="Requests per rate-limit window")
    window_sec: float = Field(default=60.0, description="Rate-limit window length (seconds)")
    max_attempts: int = Field(default=3, description="Attempts per item before fallback")
    max_requeues: int = Field(default=5, description="Rate-limit requeues per item before fallback")
    request_timeout_sec: float = Field(default=8.0, description="Per-attempt timeout, also the backoff cap")
    initial_backoff_sec: float = Field(default=1.0, description="First retry delay (seconds)")
    pace_requests: bool = Field(default=False, description="Spread requests evenly across the window")

    class Config:
        env_prefix = "ENRICHMENT_"


class LLMSettings(BaseSettings):
    """Inference API settings"""
    provider: str = Field(default="openai", description="LLM provider")
    model_name: Optional[str] = Field(default="gpt-3.5-turbo", description="Model name")
    temperature: float = Field(default=0.3, description="Sampling temperature")
    max_tokens: int = Field(default=500, description="Max generated tokens")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    base_url: Optional[str] = Field(default=None, description="OpenAI-compatible base URL")

    class Config:
        env_prefix = "LLM_"


class Settings(BaseSettings):
    """Top-level settings aggregating every section"""

    news: NewsSettings = Field(default_factory=NewsSettings)
    discussion: DiscussionSettings = Field(default_factory=DiscussionSettings)
    aggregator: AggregatorSettings = Field(default_factory=AggregatorSettings)
    enrichment: EnrichmentSettings = Field(default_factory=EnrichmentSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings after applying an optional .env file (default: config/.env)"""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            news=NewsSettings(),
            discussion=DiscussionSettings(),
            aggregator=AggregatorSettings(),
            enrichment=EnrichmentSettings(),
            llm=LLMSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, loaded once"""
    return Settings.load_from_env_file()


def get_enrichment_settings() -> EnrichmentSettings:
    return get_settings().enrichment


def get_llm_settings() -> LLMSettings:
    return get_settings().llm
