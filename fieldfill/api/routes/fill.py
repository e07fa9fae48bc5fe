"""Fill and generate API routes."""

import logging
from typing import Annotated, Any, Dict, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from fieldfill.models.options import FillOptions, GenerateOptions
from fieldfill.services.filler import FieldFiller, get_filler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["fill"])


class FillRequest(BaseModel):
    """Record to fill."""

    data: Union[Dict[str, Any], list] = Field(..., description="JSON object or array to fill")
    options: Optional[FillOptions] = Field(default=None, description="Fill options")


class FillResponse(BaseModel):
    """Filled record."""

    data: Any


class GenerateRequest(BaseModel):
    """Schema to generate records from."""

    model_config = ConfigDict(populate_by_name=True)

    definition: Union[str, Dict[str, Any]] = Field(
        ...,
        alias="schema",
        description="Example object or a type definition such as 'interface User { ... }'",
    )
    count: int = Field(default=1, ge=1, le=100, description="Number of records")
    context: Optional[str] = Field(default=None, description="Hint passed to the AI provider")
    overrides: Dict[str, Any] = Field(default_factory=dict, description="Per-call overrides")


class GenerateResponse(BaseModel):
    """Generated records."""

    data: Any
    count: int


@router.post("/fill", response_model=FillResponse)
async def fill_record(
    request: FillRequest,
    filler: Annotated[FieldFiller, Depends(get_filler)],
) -> FillResponse:
    """Fill null, missing and empty values in a JSON document."""
    filled = await filler.fill(request.data, request.options)
    return FillResponse(data=filled)


@router.post("/generate", response_model=GenerateResponse)
async def generate_records(
    request: GenerateRequest,
    filler: Annotated[FieldFiller, Depends(get_filler)],
) -> GenerateResponse:
    """Generate one or more records from a schema.

    A single record is returned as an object, several as an array.
    """
    options = GenerateOptions(context=request.context, overrides=request.overrides)
    logger.info(f"Generating {request.count} record(s)")

    if request.count == 1:
        record = await filler.generate(request.definition, options)
        return GenerateResponse(data=record, count=1)

    records = await filler.generate_many(request.definition, request.count, options)
    return GenerateResponse(data=records, count=len(records))
