"""Fill and generate option models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class FillOptions(BaseModel):
    """Options for a single fill call."""

    null_only: bool = Field(default=False, description="Only fill null values")
    undefined_only: bool = Field(default=False, description="Only fill undefined values")
    empty_strings_only: bool = Field(default=False, description="Only fill empty strings")
    fill_empty_arrays: bool = Field(default=True, description="Fill empty arrays")
    array_length: Optional[int] = Field(
        default=None, ge=1, description="Number of items generated for empty arrays"
    )
    context: Optional[str] = Field(default=None, description="Hint passed to the AI provider")
    overrides: Dict[str, Any] = Field(
        default_factory=dict, description="Per-call overrides, shadowing instance overrides"
    )

    model_config = {"arbitrary_types_allowed": True}


class GenerateOptions(BaseModel):
    """Options for generating records from a schema."""

    context: Optional[str] = Field(default=None, description="Hint passed to the AI provider")
    overrides: Dict[str, Any] = Field(default_factory=dict, description="Per-call overrides")

    model_config = {"arbitrary_types_allowed": True}
