"""
Source Clients Module
"""
from .base import BaseSourceClient
from .news_scraper import NewsScraper, combine_article_text
from .discussion_scraper import DiscussionScraper
from .classification import (
    UNKNOWN_LOCATION,
    detect_crisis_type,
    extract_location,
    relevance_score,
)

__all__ = [
    "BaseSourceClient",
    "NewsScraper",
    "DiscussionScraper",
    "combine_article_text",
    "UNKNOWN_LOCATION",
    "detect_crisis_type",
    "extract_location",
    "relevance_score",
]
