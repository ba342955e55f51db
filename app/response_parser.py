
from typing import Any

from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import StrOutputParser


class ResponseParser(StrOutputParser):
    """Pulls the plain text out of a chat model reply.

    Gemini replies carry either a string or a list of content parts; only the
    text parts are kept, in order.
    """

    def parse_result(self, result: Any) -> str:
        content = result.content if isinstance(result, BaseMessage) else result
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(self._part_text(part) for part in content)
        return str(content)

    @staticmethod
    def _part_text(part: Any) -> str:
        if isinstance(part, str):
            return part
        if isinstance(part, dict) and part.get("type", "text") == "text":
            return part.get("text") or ""
        return ""
