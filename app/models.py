
from pydantic import BaseModel, Field, StrictStr


class ChatRequest(BaseModel):
    message: StrictStr = Field(..., min_length=1, description="Prompt forwarded to the model")


class ChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
