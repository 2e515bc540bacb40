from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import SchemaError

ModelT = TypeVar("ModelT", bound="WireModel")


class WireModel(BaseModel):
    """Immutable projection of a server-owned record, parsed from camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @classmethod
    def from_json(cls: Type[ModelT], data: Any) -> ModelT:
        """Validate ``data`` into a model, raising :class:`SchemaError` on mismatch."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SchemaError(f"Invalid {cls.__name__} payload: {exc}") from exc

    @classmethod
    def list_from_json(cls: Type[ModelT], data: Any) -> list[ModelT]:
        try:
            return TypeAdapter(list[cls]).validate_python(data)
        except ValidationError as exc:
            raise SchemaError(f"Invalid {cls.__name__} list payload: {exc}") from exc

    def to_json(self) -> dict[str, Any]:
        """Return the camelCase JSON representation."""
        return self.model_dump(mode="json", by_alias=True)
