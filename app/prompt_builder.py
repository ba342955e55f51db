
from typing import List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage


class PromptBuilder:
    """
    Builds the message list sent to the chat model.

    The user prompt is passed through verbatim as a single human turn; no
    history is kept between requests.
    """

    def __init__(self, system_prompt: Optional[str] = None):
        self.system_prompt = system_prompt

    def build(self, prompt: str) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        if self.system_prompt:
            messages.append(SystemMessage(content=self.system_prompt))
        messages.append(HumanMessage(content=prompt))
        return messages
