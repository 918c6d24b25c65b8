"""
LLM access using Google Generative AI (Gemini).
Uses LLM_API_KEY from environment (Gemini API key from Google AI Studio).
The SDK is synchronous; async wrappers run it in the default thread pool.
"""
import asyncio
import logging
from typing import Optional

from genia import config

logger = logging.getLogger(__name__)


def _get_api_key() -> Optional[str]:
    return config.LLM_API_KEY


def _configure():
    import google.generativeai as genai
    api_key = _get_api_key()
    if not api_key:
        raise ValueError("LLM_API_KEY not found in environment")
    genai.configure(api_key=api_key)
    return genai


def _sync_chat(
    system_prompt: str,
    user_text: str,
    model: str = config.TEXT_MODEL,
    response_mime_type: Optional[str] = None,
) -> str:
    """Synchronous chat completion using Google Generative AI."""
    genai = _configure()
    model_name = model if model and "gemini" in model else "gemini-2.0-flash"
    generation_config = {"response_mime_type": response_mime_type} if response_mime_type else None
    gemini = genai.GenerativeModel(
        model_name,
        system_instruction=system_prompt,
        generation_config=generation_config,
    )
    response = gemini.generate_content(user_text)
    if not response or not response.text:
        raise ValueError("Empty response from LLM")
    return response.text


def _sync_generate_image(prompt: str, model: str = config.IMAGE_MODEL) -> Optional[bytes]:
    """Synchronous image generation. Returns the first inline image, if any."""
    genai = _configure()
    gemini = genai.GenerativeModel(
        model,
        generation_config={"response_modalities": ["TEXT", "IMAGE"]},
    )
    response = gemini.generate_content(prompt)
    for candidate in response.candidates or []:
        for part in candidate.content.parts:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data and (inline.mime_type or "").startswith("image/"):
                return inline.data
    return None


async def chat(
    system_prompt: str,
    user_text: str,
    model: str = config.TEXT_MODEL,
    response_mime_type: Optional[str] = None,
) -> str:
    """Async chat completion. Runs sync SDK in thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        lambda: _sync_chat(system_prompt, user_text, model, response_mime_type),
    )


async def generate_image(prompt: str, model: str = config.IMAGE_MODEL) -> Optional[bytes]:
    """Async image generation. Runs sync SDK in thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        lambda: _sync_generate_image(prompt, model),
    )
