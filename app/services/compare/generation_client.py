"""Text generation client for comparison prompts across LLM providers"""

import asyncio
import logging

from anthropic import AsyncAnthropic
import google.generativeai as genai
from openai import AsyncOpenAI

from app.config.settings import settings
from app.services.compare.errors import UpstreamCallFailure
from app.services.compare.prompt_builder import GenerationRequest

logger = logging.getLogger(__name__)


class GenerationClient:
    """Send one GenerationRequest to the configured provider and return its text"""

    def __init__(self, provider: str | None = None):
        self.provider = provider or settings.LLM_PROVIDER

        if self.provider == "gemini":
            if not settings.GEMINI_API_KEY:
                raise ValueError("GEMINI_API_KEY is required when LLM_PROVIDER is 'gemini'")
            genai.configure(api_key=settings.GEMINI_API_KEY)
            self.gemini_model_name = settings.GEMINI_MODEL
        elif self.provider == "openai":
            if not settings.OPENAI_API_KEY:
                raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER is 'openai'")
            self.openai_client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.LLM_TIMEOUT_SECONDS,
            )
        elif self.provider == "anthropic":
            if not settings.ANTHROPIC_API_KEY:
                raise ValueError("ANTHROPIC_API_KEY is required when LLM_PROVIDER is 'anthropic'")
            self.anthropic_client = AsyncAnthropic(
                api_key=settings.ANTHROPIC_API_KEY,
                timeout=settings.LLM_TIMEOUT_SECONDS,
            )
        else:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")

    async def generate(self, request: GenerationRequest) -> str:
        """
        Run one generation call

        Args:
            request: Prompt and fixed generation parameters

        Returns:
            Raw response text, expected to hold one JSON object

        Raises:
            UpstreamCallFailure: The provider errored or returned no text
        """
        try:
            if self.provider == "gemini":
                text = await self._generate_gemini(request)
            elif self.provider == "openai":
                text = await self._generate_openai(request)
            else:
                text = await self._generate_anthropic(request)
        except Exception as e:
            logger.error(f"Comparison generation failed ({self.provider}): {e.__class__.__name__}")
            raise UpstreamCallFailure(f"Failed to get AI comparison from {self.provider}") from e

        if not text:
            raise UpstreamCallFailure(f"Empty AI comparison from {self.provider}")

        logger.info(f"Generated comparison with {self.provider} ({len(text)} chars)")
        return text

    async def _generate_gemini(self, request: GenerationRequest) -> str:
        """Generate using Google Gemini"""
        model = genai.GenerativeModel(
            settings.GEMINI_MODEL,
            system_instruction=request.system_instruction,
        )

        # Gemini SDK is sync, so run it in executor
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: model.generate_content(
                request.prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=request.temperature,
                    max_output_tokens=request.max_output_tokens,
                ),
                request_options={"timeout": settings.LLM_TIMEOUT_SECONDS},
            )
        )
        return response.text

    async def _generate_openai(self, request: GenerationRequest) -> str:
        """Generate using OpenAI GPT"""
        response = await self.openai_client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": request.system_instruction},
                {"role": "user", "content": request.prompt},
            ],
            temperature=request.temperature,
            max_tokens=request.max_output_tokens,
        )
        return response.choices[0].message.content or ""

    async def _generate_anthropic(self, request: GenerationRequest) -> str:
        """Generate using Anthropic Claude"""
        response = await self.anthropic_client.messages.create(
            model=settings.ANTHROPIC_MODEL,
            system=request.system_instruction,
            max_tokens=request.max_output_tokens,
            temperature=request.temperature,
            messages=[{"role": "user", "content": request.prompt}],
        )
        return response.content[0].text
