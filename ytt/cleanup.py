# ytt/cleanup.py
"""
Optional LLM cleanup of fetched transcripts.

Responsibility:
- Send the joined transcript text to a chat model with a fixed prompt
- Return the cleaned (optionally markdown-formatted) text

AI usage:
- Prompts versioned and isolated as module constants
- Invocation isolated in TranscriptCleaner.cleanup()
- Failures surface as HttpError, never as a partial result
"""

from __future__ import annotations

import os
from typing import Optional
from uuid import uuid4

from openai import AsyncOpenAI, OpenAIError

from ytt.logging_core.logger import get_logger, log_event
from ytt.transcripts.errors import HttpError

import logging


# Versioned prompts, changed only together with CLEANUP_PROMPT_VERSION
CLEANUP_PROMPT_VERSION = "v1"
DEFAULT_MODEL = "gpt-4o-mini"
TEMPERATURE = 0.3

MISSING_KEY_MESSAGE = (
    "OpenAI API key not found. Set OPENAI_API_KEY environment variable or use --openai-key flag"
)

SYSTEM_PROMPT = (
    "You are a helpful assistant that cleans up and improves transcripts while preserving their "
    "original meaning. You remove promotional content like product mentions, website URLs, course "
    "offers, and training programs."
)

MARKDOWN_INSTRUCTION = (
    "Format the cleaned transcript using Markdown syntax. Use appropriate markdown elements like:\n"
    "- **Bold** for emphasis on important points\n"
    "- *Italics* for subtle emphasis\n"
    "- Headings (##, ###) to organize sections if the transcript has clear topics\n"
    "- Bullet points (-) or numbered lists (1.) for lists\n"
    "- Blockquotes (>) for notable quotes\n"
    "- Line breaks between paragraphs\n"
    "Make it well-structured and readable with proper markdown formatting.\n\n"
)

USER_PROMPT = (
    "Please clean up and improve the following transcript. "
    "Fix any grammar errors, improve sentence structure, remove filler words and repetitions, "
    "and make it more readable while preserving the original meaning and content. "
    "Do not add any information that wasn't in the original transcript.\n\n"
    "IMPORTANT: Remove all references to products, websites, courses, training programs, "
    "email addresses, social media handles, or any promotional content that the presenter may offer. "
    "Focus only on the educational or informational content.\n\n"
    "{format_instruction}"
    "Transcript:\n\n{transcript}"
)


def build_user_prompt(transcript_text: str, markdown: bool = False) -> str:
    return USER_PROMPT.format(
        format_instruction=MARKDOWN_INSTRUCTION if markdown else "",
        transcript=transcript_text,
    )


class TranscriptCleaner:
    """
    Chat-completion client for transcript cleanup.

    The API key comes from the argument, else OPENAI_API_KEY; with neither,
    construction raises HttpError. Without a logger, events go to a fresh
    run logger from get_logger().
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        *,
        client: Optional[AsyncOpenAI] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        key = api_key or os.environ.get("OPENAI_API_KEY")
        if client is None and not key:
            raise HttpError(MISSING_KEY_MESSAGE)

        self.model = model
        self._client = client or AsyncOpenAI(api_key=key)
        self._logger = logger or get_logger(uuid4())

    async def cleanup(self, transcript_text: str, markdown: bool = False) -> str:
        """Return the cleaned transcript text, stripped of surrounding whitespace."""
        log_event(
            self._logger,
            logging.INFO,
            "Requesting transcript cleanup",
            stage_name="cleanup",
            event_type="start",
            metadata={
                "model": self.model,
                "prompt_version": CLEANUP_PROMPT_VERSION,
                "markdown": markdown,
                "input_chars": len(transcript_text),
            },
        )

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(transcript_text, markdown)},
                ],
                temperature=TEMPERATURE,
            )
        except OpenAIError as exc:
            log_event(
                self._logger,
                logging.ERROR,
                "Cleanup request failed",
                stage_name="cleanup",
                event_type="failure",
                metadata={"error": str(exc)},
            )
            raise HttpError(f"Failed to call OpenAI API: {exc}") from exc

        if not response.choices or response.choices[0].message.content is None:
            raise HttpError("No response from OpenAI API")

        cleaned = response.choices[0].message.content.strip()
        log_event(
            self._logger,
            logging.INFO,
            "Transcript cleanup completed",
            stage_name="cleanup",
            event_type="success",
            metadata={"output_chars": len(cleaned)},
        )
        return cleaned
