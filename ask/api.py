import logging
import re
from typing import Callable, Optional

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError
from google.generativeai.types import StopCandidateException
from openai import OpenAI, OpenAIError

from .config import Config
from .errors import SynthesisFailure
from .executor import ExecutionHistory
from .prompts import build_system_prompt, build_user_prompt

# Configure logging
logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:[\w+-]*[ \t]*\n)?([\s\S]*?)```")


def clean_command_output(text: str) -> str:
    """Strip Markdown code fences the model may wrap around a command."""
    match = _CODE_FENCE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


class OpenAIClient:
    """A client for any OpenAI-compatible chat-completions endpoint."""

    def __init__(self, api_key: str, base_url: str, model: str):
        self.model_name = model
        self.client = OpenAI(api_key=api_key, base_url=base_url)
        logger.info(f"Initialized OpenAI-compatible client at {base_url} with model: {model}")

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class GeminiClient:
    """A client for interacting with the Google Gemini API."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        """
        Initializes the GeminiClient.

        Args:
            api_key: The Google API key.
            model: The model to use for generation.
        """
        self.api_key = api_key
        self.model_name = model
        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(self.model_name)
        logger.info(f"Initialized Gemini client with model: {self.model_name}")

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        response = self.model.generate_content(f"{system_prompt}\n\n{user_prompt}")
        return response.text or ""


def create_client(config: Config):
    """Returns the model client for the configured provider."""
    if config.provider == "gemini":
        return GeminiClient(api_key=config.gemini_api_key, model=config.model)
    return OpenAIClient(api_key=config.api_key, base_url=config.base_url, model=config.model)


class CommandSynthesizer:
    """Turns a natural-language request into a single shell command."""

    def __init__(
        self,
        client,
        language: str = "en",
        debug: bool = False,
        on_debug: Optional[Callable[[str, str], None]] = None,
    ):
        self.client = client
        self.language = language
        self.debug = debug
        self.on_debug = on_debug

    def synthesize(self, prompt: str, history: Optional[ExecutionHistory] = None) -> str:
        """
        Ask the model for a command, refining the previous attempt if given.

        Raises:
            SynthesisFailure: The request failed or the reply held no command.
        """
        system_prompt = build_system_prompt(self.language)
        user_prompt = build_user_prompt(prompt, history, self.language)

        if self.debug and self.on_debug is not None:
            self.on_debug(system_prompt, user_prompt)

        try:
            reply = self.client.complete(system_prompt, user_prompt)
        except (OpenAIError, GoogleAPIError, StopCandidateException, ValueError) as e:
            logger.info(f"Error generating shell command: {e}")
            raise SynthesisFailure(str(e)) from e

        command = clean_command_output(reply or "")
        if not command:
            logger.info("Model returned an empty command")
            raise SynthesisFailure("the model returned an empty response")

        logger.debug(f"Synthesized command: {command}")
        return command
