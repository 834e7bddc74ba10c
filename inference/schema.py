"""
Declarative output schemas.

A small tagged union describing the JSON shape a caller expects back from the
model. The same description is used twice:

- describe(): serialised into the system instruction so the model can conform
- validate(): checks a parsed response and returns the conforming value

Validation compiles the description into a pydantic model on first use.
Callers never see pydantic types; they only build Schema nodes.

Example:
    schema = obj({
        "questions": array(obj({"text": string(), "options": array(string(), optional=True)})),
    })
    schema.validate({"questions": [{"text": "2 + 2 = 4"}]})
"""

import json
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, BeforeValidator, Field, StrictBool, StrictFloat, StrictInt, StrictStr, ValidationError, create_model

from .errors import SchemaValidationError


@dataclass(frozen=True, kw_only=True)
class Schema:
    """Base node. Every node may be optional and carry a description."""

    kind: ClassVar[str] = "any"

    description: Optional[str] = None
    optional: bool = False

    def describe(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.kind}
        if self.description:
            out["description"] = self.description
        return out

    def annotation(self, name: str) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class StringSchema(Schema):
    kind: ClassVar[str] = "string"

    def annotation(self, name: str) -> Any:
        return StrictStr


@dataclass(frozen=True)
class NumberSchema(Schema):
    kind: ClassVar[str] = "number"

    def annotation(self, name: str) -> Any:
        return Union[StrictInt, StrictFloat]


def _integral_float_to_int(value: Any) -> Any:
    # JSON writers often emit 3.0 for 3
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class IntegerSchema(Schema):
    kind: ClassVar[str] = "integer"

    def annotation(self, name: str) -> Any:
        return Annotated[StrictInt, BeforeValidator(_integral_float_to_int)]


@dataclass(frozen=True)
class BooleanSchema(Schema):
    kind: ClassVar[str] = "boolean"

    def annotation(self, name: str) -> Any:
        return StrictBool


@dataclass(frozen=True)
class EnumSchema(Schema):
    kind: ClassVar[str] = "string"

    values: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.values:
            raise ValueError("EnumSchema needs at least one value")

    def describe(self) -> Dict[str, Any]:
        out = super().describe()
        out["enum"] = list(self.values)
        return out

    def annotation(self, name: str) -> Any:
        return Literal[tuple(self.values)]  # type: ignore[valid-type]


@dataclass(frozen=True)
class ArraySchema(Schema):
    kind: ClassVar[str] = "array"

    items: Schema = None  # type: ignore[assignment]
    min_items: Optional[int] = None
    max_items: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.items, Schema):
            raise ValueError("ArraySchema.items must be a Schema")

    def describe(self) -> Dict[str, Any]:
        out = super().describe()
        out["items"] = self.items.describe()
        if self.min_items is not None:
            out["minItems"] = self.min_items
        if self.max_items is not None:
            out["maxItems"] = self.max_items
        return out

    def annotation(self, name: str) -> Any:
        return Annotated[
            List[self.items.annotation(f"{name}Item")],  # type: ignore[misc]
            Field(min_length=self.min_items, max_length=self.max_items),
        ]


@dataclass(frozen=True, eq=False)
class ObjectSchema(Schema):
    kind: ClassVar[str] = "object"

    fields: Mapping[str, Schema] = None  # type: ignore[assignment]

    def __post_init__(self):
        if not self.fields:
            raise ValueError("ObjectSchema needs at least one field")

    def describe(self) -> Dict[str, Any]:
        out = super().describe()
        out["properties"] = {name: node.describe() for name, node in self.fields.items()}
        out["required"] = [name for name, node in self.fields.items() if not node.optional]
        return out

    def annotation(self, name: str) -> Any:
        return self.model

    @cached_property
    def model(self) -> type:
        """Pydantic model equivalent of this node (built once per schema)."""
        definitions: Dict[str, Any] = {}
        for index, (field_name, node) in enumerate(self.fields.items()):
            # Positional attribute names; JSON keys are carried as aliases so any
            # key (keywords, leading underscores, camelCase) survives.
            ann = node.annotation(field_name)
            if node.optional:
                definitions[f"f{index}"] = (Optional[ann], Field(default=None, alias=field_name))
            else:
                definitions[f"f{index}"] = (ann, Field(..., alias=field_name))
        return create_model("OutputObject", __base__=_OutputBase, **definitions)

    def to_prompt(self) -> str:
        """JSON text of describe(), embedded in system instructions."""
        return json.dumps(self.describe(), ensure_ascii=False)

    def validate(self, value: Any) -> Dict[str, Any]:
        """
        Check a parsed JSON value against this schema.

        Returns:
            The conforming value as plain dicts/lists (unknown keys dropped).

        Raises:
            SchemaValidationError: value does not match.
        """
        if not isinstance(value, dict):
            raise SchemaValidationError(
                f"expected a JSON object, got {type(value).__name__}"
            )
        try:
            instance = self.model.model_validate(value)
        except ValidationError as e:
            raise SchemaValidationError(_summarize(e)) from e
        return instance.model_dump(by_alias=True, exclude_unset=True)


class _OutputBase(BaseModel):
    model_config = {"populate_by_name": False, "extra": "ignore", "allow_inf_nan": False}


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors()[:5]:
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc or '<root>'}: {item.get('msg')}")
    return "; ".join(parts)


# ── Builders ──────────────────────────────────────────────────────────────────

def string(description: Optional[str] = None, optional: bool = False) -> StringSchema:
    return StringSchema(description=description, optional=optional)


def number(description: Optional[str] = None, optional: bool = False) -> NumberSchema:
    return NumberSchema(description=description, optional=optional)


def integer(description: Optional[str] = None, optional: bool = False) -> IntegerSchema:
    return IntegerSchema(description=description, optional=optional)


def boolean(description: Optional[str] = None, optional: bool = False) -> BooleanSchema:
    return BooleanSchema(description=description, optional=optional)


def enum(*values: str, description: Optional[str] = None, optional: bool = False) -> EnumSchema:
    return EnumSchema(values=tuple(values), description=description, optional=optional)


def array(
    items: Schema,
    description: Optional[str] = None,
    optional: bool = False,
    min_items: Optional[int] = None,
    max_items: Optional[int] = None,
) -> ArraySchema:
    return ArraySchema(
        items=items,
        description=description,
        optional=optional,
        min_items=min_items,
        max_items=max_items,
    )


def obj(fields: Mapping[str, Schema], description: Optional[str] = None, optional: bool = False) -> ObjectSchema:
    return ObjectSchema(fields=dict(fields), description=description, optional=optional)
