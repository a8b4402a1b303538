"""
OpenAI API Client

Provides a simple async wrapper for the chat completions API, used by the
recommendation and chat endpoints.

Usage:
    from src.ai import OpenAIClient

    client = OpenAIClient()
    response = await client.generate("Is 100% cashmere worth it?", system="Be brief.")
"""

import asyncio
import os
import sys
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI, OpenAIError
from rich.console import Console

sys.path.insert(0, str(__file__).rsplit("/", 3)[0])
from config.settings import config

console = Console()


@dataclass
class OpenAIConfig:
    """Configuration for OpenAI client."""

    api_key: Optional[str] = None

    # Model selection (override via env: OPENAI_CHAT_MODEL)
    chat_model: str = config.ai.chat_model

    # Timeouts
    timeout_seconds: float = config.ai.timeout_seconds

    # Generation settings
    temperature: float = 0.7
    max_tokens: int = 250


class OpenAIClient:
    """
    Async client for OpenAI chat completions.

    Errors from the API are printed and re-raised so callers can map them
    (quota, rate limit, bad key) to their own responses.
    """

    def __init__(self, config: Optional[OpenAIConfig] = None):
        self.config = config or OpenAIConfig()
        if os.getenv("OPENAI_CHAT_MODEL"):
            self.config.chat_model = os.getenv("OPENAI_CHAT_MODEL")
        # Get API key from config or environment
        api_key = self.config.api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment variable."
            )
        self._client = AsyncOpenAI(
            api_key=api_key,
            timeout=self.config.timeout_seconds,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    async def is_available(self) -> bool:
        """Check if OpenAI API is accessible."""
        try:
            await self._client.models.list()
            return True
        except OpenAIError as e:
            console.print(f"[red]OpenAI API not available: {e}[/red]")
            return False

    async def chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Run a chat completion.

        Args:
            messages: List of {"role": "user/assistant/system", "content": "..."}
            model: Model to use (defaults to chat_model)
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate

        Returns:
            Assistant's response, stripped
        """
        model = model or self.config.chat_model
        token_limit = max_tokens or self.config.max_tokens
        temperature = self.config.temperature if temperature is None else temperature

        try:
            # GPT-5.x models use max_completion_tokens instead of max_tokens
            if model.startswith("gpt-5"):
                response = await self._client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_completion_tokens=token_limit,
                )
            else:
                response = await self._client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=token_limit,
                )
        except OpenAIError as e:
            console.print(f"[red]Error generating response: {e}[/red]")
            raise

        return (response.choices[0].message.content or "").strip()

    async def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Single-turn generation with an optional system prompt."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return await self.chat(messages, model=model, temperature=temperature, max_tokens=max_tokens)


async def test_client():
    """Test the OpenAI client."""
    console.print("\n[bold cyan]Testing OpenAI Client[/bold cyan]\n")

    try:
        async with OpenAIClient() as client:
            available = await client.is_available()
            console.print(f"OpenAI API available: {'✓' if available else '✗'}")
            if not available:
                console.print("[red]Please check your OPENAI_API_KEY[/red]")
                return

            response = await client.generate(
                "In one sentence, why does fibre content matter for a sweater?",
                temperature=0.5,
            )
            console.print(f"Response: {response[:500]}")

    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")


if __name__ == "__main__":
    asyncio.run(test_client())
