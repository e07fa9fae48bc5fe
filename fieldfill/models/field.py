"""Field-related models."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class _Undefined:
    """Marker for a value that is absent rather than null."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: Any) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


class FieldDescriptor(BaseModel):
    """A missing field discovered while walking a record."""

    key: str = Field(..., description="Leaf property name")
    path: str = Field(..., description="Address from the record root, e.g. 'items[0].name'")
    value: Any = Field(default=None, description="Original empty value")
    type: str = Field(..., description="Semantic type of the original value")
    parent_key: Optional[str] = Field(default=None, description="Key of the enclosing object")
    is_null: bool = Field(default=False)
    is_undefined: bool = Field(default=False)
    is_empty: bool = Field(default=False)

    model_config = {"arbitrary_types_allowed": True}
