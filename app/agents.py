# app/agents.py
from __future__ import annotations

from typing import Any

from langchain_core.language_models import BaseChatModel

from .exceptions import EmptyCompletionError, ExternalServiceError
from .logger import get_logger
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser

logger = get_logger(__name__)


class CompletionAgent:
    """
    Single-shot completion wrapper around a chat model.

    Responsibilities
    ----------------
    1. Build the messages for the prompt              -> PromptBuilder
    2. Call the chat model exactly once               -> BaseChatModel.ainvoke
    3. Extract the reply text                         -> ResponseParser
    4. Report every failure as ``ExternalServiceError``
    """

    def __init__(
        self,
        llm: BaseChatModel | Any,
        builder: PromptBuilder,
        parser: ResponseParser,
    ) -> None:
        self._llm = llm
        self._builder = builder
        self._parser = parser

    async def generate(self, prompt: str) -> str:
        """
        Send ``prompt`` to the model and return the generated text.

        Raises
        ------
        ExternalServiceError
            If the model call or the reply parsing fails. The original
            exception message is kept and the exception is chained.
        EmptyCompletionError
            If the model answered with no text.
        """
        messages = self._builder.build(prompt)
        try:
            logger.debug("Sending request to Gemini API")
            reply = await self._llm.ainvoke(messages)
            logger.debug("Received response from Gemini API")
            text = self._parser.parse_result(reply)
        except ExternalServiceError:
            raise
        except Exception as exc:
            logger.error("Gemini API error: %s: %s", type(exc).__name__, exc)
            raise ExternalServiceError(str(exc)) from exc

        if not text:
            raise EmptyCompletionError()
        return text
