"""Wire types for the OpenRouter chat completions endpoint.

Bounds are checked by ``OpenRouterService`` rather than here, and surface as
``api.errors.ValidationError``.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class JsonSchemaSpec(BaseModel):
    name: str
    strict: bool = True
    # Any, so a non-object schema reaches the adapter's own check
    schema_: Any = Field(alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class ResponseFormat(BaseModel):
    type: Literal["json_schema"] = "json_schema"
    json_schema: JsonSchemaSpec


class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage] = Field(default_factory=list)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    response_format: Optional[ResponseFormat] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the provider, omitting unset optional parameters."""
        return self.model_dump(by_alias=True, exclude_none=True)
