"""
Flavor text for quests, items and level-ups.

Text comes from an optional LLM behind any OpenAI-compatible API
(Ollama, OpenRouter, OpenAI, ...). When the provider is disabled,
unreachable, slow or returns nothing, a fixed template is used instead;
flavor never blocks or fails the operation that asked for it.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from openai import AsyncOpenAI

from hunter.content import (
    DIFFICULTY_TONE,
    ITEM_FLAVOR,
    LEVEL_UP_MESSAGES,
    QUEST_FLAVOR,
    RARITY_TONE,
)
from hunter.models import Difficulty, ItemType, Rarity, parse_difficulty, parse_item_type, parse_rarity

if TYPE_CHECKING:
    from hunter.config import HunterConfig

logger = logging.getLogger(__name__)


class FlavorProvider(Protocol):
    """
    Interface for flavor text providers.

    Supports any OpenAI-compatible API.
    """

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 96,
        temperature: float = 0.8,
    ) -> str:
        """
        Generate a completion from messages.

        Args:
            messages: List of {"role": "user"|"assistant"|"system", "content": str}
            max_tokens: Maximum tokens in response
            temperature: Randomness (0.0 = deterministic, 1.0 = creative)

        Returns:
            Generated text response
        """
        ...

    @property
    def is_available(self) -> bool:
        """Whether the provider is configured and ready."""
        ...


@dataclass
class OpenAICompatibleProvider:
    """
    Flavor provider for an OpenAI-compatible chat completions endpoint.

    Defaults target a local Ollama server. A single attempt is made per
    request; the caller falls back to templates on any failure.
    """

    base_url: str = "http://localhost:11434/v1"
    model: str = "llama3.1:8b"
    api_key: str | None = None

    _client: AsyncOpenAI | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        # Ollama ignores the key but the client requires one
        self._client = AsyncOpenAI(
            api_key=self.api_key or "ollama",
            base_url=self.base_url,
            max_retries=0,
        )

    @property
    def is_available(self) -> bool:
        """Whether the provider is configured and ready."""
        return self._client is not None

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 96,
        temperature: float = 0.8,
    ) -> str:
        """Request one chat completion and return its text."""
        if self._client is None:
            raise RuntimeError("Flavor provider not configured")

        response = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return response.choices[0].message.content or ""


@dataclass
class MockFlavorProvider:
    """
    Mock flavor provider for testing.

    Returns canned responses keyed by the last user message, or raises
    `error` when set to simulate an unreachable endpoint.
    """

    responses: dict[str, str] = field(default_factory=dict)
    default: str = "[Mock flavor]"
    error: Exception | None = None
    calls: list[list[dict[str, str]]] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        """Mock provider is always available."""
        return True

    async def complete(
        self,
        messages: list[dict[str, str]],
        max_tokens: int = 96,
        temperature: float = 0.8,
    ) -> str:
        """Return a mock response."""
        self.calls.append(messages)
        if self.error is not None:
            raise self.error

        last_user_msg = next(
            (m["content"] for m in reversed(messages) if m["role"] == "user"),
            "",
        )
        return self.responses.get(last_user_msg, self.default)

    def set_response(self, trigger: str, response: str) -> None:
        """Set a custom response for a specific input."""
        self.responses[trigger] = response


@dataclass
class FlavorService:
    """
    Flavor text with template fallback.

    With no provider every call returns a template. With a provider,
    each call waits at most `timeout` seconds before falling back.
    """

    provider: FlavorProvider | None = None
    timeout: float = 5.0
    rng: random.Random = field(default_factory=random.Random)

    @property
    def is_available(self) -> bool:
        """Whether LLM flavor is available."""
        return self.provider is not None and self.provider.is_available

    async def _generate(self, system_prompt: str, user_prompt: str, fallback: str) -> str:
        if not self.is_available:
            return fallback

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            text = await asyncio.wait_for(self.provider.complete(messages), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Flavor provider timed out after %.1fs, using template", self.timeout)
            return fallback
        except Exception as e:
            logger.warning("Flavor provider failed (%s), using template", e)
            return fallback

        text = text.strip()
        return text or fallback

    async def quest_flavor(self, title: str, difficulty: Difficulty | str) -> str:
        """
        Generate a 1-2 sentence quest description.

        Args:
            title: Quest title
            difficulty: Quest rank, sets the tone

        Returns:
            Flavor text, from the provider or a template
        """
        rank = parse_difficulty(difficulty)
        fallback = self.rng.choice(QUEST_FLAVOR[rank])

        system_prompt = f"""You are the System - a mysterious game-like interface that assigns quests to hunters. Generate a single SHORT (1-2 sentences) flavor text description for a quest.

Style guidelines:
- Mysterious and game-like tone
- Reference "the System" or "hunters" occasionally
- Match the quest difficulty ({rank.value}-rank: {DIFFICULTY_TONE[rank]})
- Be concise and atmospheric
- NO introductions like "Quest:" or "Description:"
- Just the flavor text itself"""

        return await self._generate(system_prompt, f'Quest: "{title}"', fallback)

    async def item_flavor(self, name: str, rarity: Rarity | str, item_type: ItemType | str) -> str:
        """Generate a one-sentence item description."""
        rarity = parse_rarity(rarity)
        item_type = parse_item_type(item_type)
        fallback = self.rng.choice(ITEM_FLAVOR[rarity])

        system_prompt = f"""You are the System. Generate a single SHORT (1 sentence) atmospheric description for an item reward.

Style guidelines:
- Mysterious and game-like tone
- Match rarity ({rarity.value}: {RARITY_TONE[rarity]})
- Type: {item_type.value}
- Be concise and evocative
- NO item name in the description
- Just the description itself"""

        return await self._generate(system_prompt, f'Item: "{name}"', fallback)

    async def level_up_message(self, level: int, rank: str) -> str:
        """Generate a one-sentence level-up message."""
        fallback = self.rng.choice(LEVEL_UP_MESSAGES).format(level=level, rank=rank)

        system_prompt = f"""You are the System. Generate a SHORT (1 sentence) congratulatory level-up message.

Style: Mysterious, encouraging, game-like. Reference the level ({level}) or rank ({rank}) naturally."""

        return await self._generate(system_prompt, "Generate level up message", fallback)


def create_flavor_service(config: HunterConfig | None = None) -> FlavorService:
    """
    Factory function to create a flavor service from configuration.

    Returns a template-only service when flavor is disabled.
    """
    if config is None:
        from hunter.config import HunterConfig

        config = HunterConfig()

    if not config.flavor_enabled:
        return FlavorService(provider=None, timeout=config.flavor_timeout)

    provider = OpenAICompatibleProvider(
        base_url=config.flavor_base_url,
        model=config.flavor_model,
        api_key=config.flavor_api_key,
    )
    logger.info("Flavor text enabled (%s at %s)", config.flavor_model, config.flavor_base_url)
    return FlavorService(provider=provider, timeout=config.flavor_timeout)
