"""Geni AI Content Provider

Gemini-backed implementation of the three generation operations the
pipeline consumes:
- outline: subject -> ordered sections (JSON)
- write_section: one section brief -> prose
- render_image: prompt -> image bytes, or None
"""

from typing import List, Optional, Protocol
import json
import logging

from genia.models.generation import ContentDepth, OutputKind, Section
from utils import llm_chat

logger = logging.getLogger(__name__)


class ContentProvider(Protocol):
    """Operations consumed by the generation pipeline."""

    async def outline(
        self,
        subject: str,
        kind: OutputKind,
        language: str,
        count: int,
        style: Optional[str] = None,
    ) -> List[Section]: ...

    async def write_section(self, title: str, brief: str, language: str, depth: ContentDepth) -> str: ...

    async def render_image(self, prompt: str) -> Optional[bytes]: ...


DEPTH_INSTRUCTIONS = {
    ContentDepth.STANDARD: "Write a clear, well-structured text of about 400 words.",
    ContentDepth.DETAILED: "Write a detailed text of about 800 words with concrete examples.",
    ContentDepth.EXPERT: "Write an expert-level text of about 1200 words, with precise terminology, data points and actionable advice.",
}


def parse_outline(response_text: str) -> List[Section]:
    """Parse the outline JSON, tolerating markdown code fences."""
    text = response_text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse outline as JSON: {e}")
        logger.error(f"Response text: {text[:500]}...")
        raise ValueError("LLM outline not valid JSON") from e

    if isinstance(data, dict):
        data = data.get("sections") or data.get("chapters") or data.get("slides") or []
    if not isinstance(data, list):
        raise ValueError("LLM outline is not a list")

    sections = [Section(**item) for item in data if isinstance(item, dict) and item.get("title")]
    if not sections:
        raise ValueError("LLM outline is empty")
    return sections


class GeminiContentProvider:
    """Content provider backed by Google Generative AI."""

    async def outline(
        self,
        subject: str,
        kind: OutputKind,
        language: str,
        count: int,
        style: Optional[str] = None,
    ) -> List[Section]:
        unit = "chapters of a book" if kind == OutputKind.DOCUMENT else "slides of a presentation"
        system_prompt = (
            "You are an expert editor who designs the structure of professional "
            f"{'e-books' if kind == OutputKind.DOCUMENT else 'slide decks'}. "
            "Answer only with JSON."
        )
        parts = [
            f"Design exactly {count} {unit} about: {subject}",
            f"Language: {language}",
        ]
        if style:
            parts.append(f"Visual and editorial style: {style}")
        parts.append(
            'Return a JSON array of objects with keys "title", "brief" '
            '(instructions for writing the content) and "image_prompt" '
            "(an English prompt for a professional illustration)."
        )
        response = await llm_chat.chat(
            system_prompt,
            "\n".join(parts),
            response_mime_type="application/json",
        )
        sections = parse_outline(response)
        logger.info(f"Outline for '{subject}': {len(sections)} sections")
        return sections

    async def write_section(self, title: str, brief: str, language: str, depth: ContentDepth) -> str:
        system_prompt = (
            "You are a professional author. Write polished, engaging prose in plain text, "
            "without markdown headings."
        )
        user_text = "\n".join([
            f"Section title: {title}",
            f"Instructions: {brief}",
            f"Language: {language}",
            DEPTH_INSTRUCTIONS[depth],
        ])
        text = await llm_chat.chat(system_prompt, user_text)
        return text.strip()

    async def render_image(self, prompt: str) -> Optional[bytes]:
        return await llm_chat.generate_image(
            f"{prompt}. Professional, high quality illustration, no text."
        )


# Global provider instance
content_provider = GeminiContentProvider()
