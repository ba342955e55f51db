from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError as PydanticValidationError

from .agents import CompletionAgent
from .config import Settings
from .exceptions import ConfigurationError, ValidationError
from .logger import get_logger
from .models import ChatRequest
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app):
    settings: Settings = app.state.settings
    logger.info("Configured port: %d", settings.port)
    logger.info("API key configured: %s", "yes" if settings.api_key else "no")
    logger.info("API key length: %d", len(settings.api_key or ""))
    yield


def get_settings(request: Request) -> Settings:
    return request.app.state.settings            # set once in create_app()


async def chat_request(request: Request) -> ChatRequest:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError() from exc
    try:
        return ChatRequest.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError() from exc


def require_api_key(settings: Settings = Depends(get_settings)) -> str:
    if not settings.api_key:
        raise ConfigurationError()
    return settings.api_key


# Only cache pure functions with hashable args
@lru_cache(maxsize=8)
def build_chat_model(
    api_key: str, model_name: str, temperature: Optional[float] = None
) -> ChatGoogleGenerativeAI:
    kwargs = {"model": model_name, "google_api_key": api_key}
    if temperature is not None:
        kwargs["temperature"] = temperature
    return ChatGoogleGenerativeAI(**kwargs)


def chat_model(
    api_key: str = Depends(require_api_key),
    settings: Settings = Depends(get_settings),
) -> ChatGoogleGenerativeAI:
    return build_chat_model(api_key, settings.model_name, settings.temperature)


def prompt_builder(settings: Settings = Depends(get_settings)) -> PromptBuilder:
    return PromptBuilder(system_prompt=settings.system_prompt)


def response_parser() -> ResponseParser:
    return ResponseParser()


def completion_agent(
    llm: ChatGoogleGenerativeAI = Depends(chat_model),
    builder: PromptBuilder = Depends(prompt_builder),
    parser: ResponseParser = Depends(response_parser),
) -> CompletionAgent:
    return CompletionAgent(llm, builder, parser)
