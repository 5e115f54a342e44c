"""
Pydantic bases for the objects that leave the tree: proofs and exported states.

Both are exchanged with JavaScript tooling, so their JSON form uses camelCase
keys. Python code may still build them with snake_case field names.
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """A model whose JSON keys are the camelCase aliases of its field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
    )

    def to_json(self) -> str:
        """Serializes the model with camelCase keys."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes) -> Self:
        """
        Parses a model from its JSON form.

        Raises:
            pydantic.ValidationError: If `data` is not valid JSON for this model.
        """
        return cls.model_validate_json(data)

    def copy(self: Self, **changes: Any) -> Self:
        """
        Returns a re-validated copy with `changes` applied.

        Unlike `model_copy(update=...)`, the changed values go through the
        same validation as a freshly constructed model.
        """
        return self.__class__(**(self.model_dump(exclude_unset=True) | changes))


class StrictBaseModel(CamelModel):
    """A frozen model that rejects unknown keys and coerces nothing."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
