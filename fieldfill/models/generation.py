"""Generation provider models."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class TokenUsage(BaseModel):
    """Token usage tracking."""

    input_tokens: int = Field(default=0)
    output_tokens: int = Field(default=0)
    total_tokens: int = Field(default=0)


class GenerationResult(BaseModel):
    """Outcome of a single generation provider call."""

    success: bool = Field(..., description="Whether generation succeeded")
    data: Optional[Any] = Field(
        default=None, description="Path-to-value mapping, or record(s) for schema generation"
    )
    error: Optional[str] = Field(default=None, description="Error message if failed")
    token_usage: TokenUsage = Field(default_factory=TokenUsage)
