"""
AI Service Module for Wooly

Provides LLM-backed features using OpenAI:
- Product recommendations with a search for a sustainable alternative
- Short answers about the product being viewed

Configuration:
- Set OPENAI_API_KEY in .env file (optionally OPENAI_CHAT_MODEL)
"""

# Import OpenAI client
try:
    from .openai_client import OpenAIClient, OpenAIConfig

    OPENAI_AVAILABLE = True
except ImportError:
    OpenAIClient = None
    OpenAIConfig = None
    OPENAI_AVAILABLE = False

from .recommender import (
    FabricRecommender,
    PageContext,
    Recommendation,
    build_search_url,
    concerning_materials,
    format_materials,
)

__all__ = [
    # Clients
    "OpenAIClient",
    "OpenAIConfig",
    # Services
    "FabricRecommender",
    "PageContext",
    "Recommendation",
    "build_search_url",
    "concerning_materials",
    "format_materials",
    # Availability flags
    "OPENAI_AVAILABLE",
]
