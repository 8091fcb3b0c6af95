"""Template AST models for invoice layouts."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class _Node(BaseModel):
    """Base model for all template nodes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Position(_Node):
    """Grid coordinates of an element, 1-based."""

    column: int = Field(default=1, ge=1)
    row: int = Field(default=1, ge=1)


class Span(_Node):
    """Number of grid tracks covered by an element."""

    column_span: int = Field(default=1, ge=1, alias="columnSpan")
    row_span: int = Field(default=1, ge=1, alias="rowSpan")


class Grid(_Node):
    """Grid definition of a section."""

    columns: int = Field(ge=1)
    min_rows: int = Field(default=0, ge=0, alias="minRows")
    """Floor for the number of rendered rows."""


class Expression(_Node):
    """Aggregate expression of a calculation."""

    operation: str
    field: str


class FieldElement(_Node):
    """A single value looked up from invoice data or a global."""

    type: Literal["field"] = "field"
    name: str
    position: Position | None = None
    span: Span | None = None


class StaticTextElement(_Node):
    """Literal text placed on the grid."""

    type: Literal["staticText"] = "staticText"
    content: str
    id: str | None = None
    position: Position | None = None
    span: Span | None = None


class StyleElement(_Node):
    """Style rule, compiled into the output style sheet."""

    type: Literal["style"] = "style"
    elements: list[str] = Field(min_length=1)
    props: dict[str, str | int | float] = {}


class CalculationElement(_Node):
    """Section-local calculation left in content by the parser."""

    type: Literal["calculation"] = "calculation"
    name: str
    expression: Expression
    is_global: bool = Field(default=False, alias="isGlobal")
    list_reference: str | None = Field(default=None, alias="listReference")
    position: Position | None = None
    span: Span | None = None


class Condition(_Node):
    """Comparison between an invoice field and a literal."""

    field: str
    op: Literal["==", "!=", ">", "<", ">=", "<="]
    value: bool | int | float | str


class ConditionalElement(_Node):
    """Content rendered only when its condition holds."""

    type: Literal["conditional"] = "conditional"
    condition: Condition
    content: list[TemplateElement] = []


class ListElement(_Node):
    """Repeated content over an array in the invoice data."""

    type: Literal["list"] = "list"
    name: str
    group_by: str | None = Field(default=None, alias="groupBy")
    aggregation: Literal["sum", "count", "avg"] | None = None
    aggregation_field: str | None = Field(default=None, alias="aggregationField")
    content: list[TemplateElement] = []
    position: Position | None = None
    span: Span | None = None
    id: str | None = None


class UnknownElement(_Node):
    """Element of a type this renderer does not know, kept as is."""

    model_config = ConfigDict(extra="allow")

    type: str
    position: Position | None = None
    span: Span | None = None


_ELEMENT_TYPES = frozenset(
    ("field", "list", "conditional", "staticText", "style", "calculation")
)


def _element_tag(value: Any) -> str:
    if isinstance(value, dict):
        tag = value.get("type")
    else:
        tag = getattr(value, "type", None)
    return tag if isinstance(tag, str) and tag in _ELEMENT_TYPES else "unknown"


TemplateElement = Annotated[
    Union[
        Annotated[FieldElement, Tag("field")],
        Annotated[ListElement, Tag("list")],
        Annotated[ConditionalElement, Tag("conditional")],
        Annotated[StaticTextElement, Tag("staticText")],
        Annotated[StyleElement, Tag("style")],
        Annotated[CalculationElement, Tag("calculation")],
        Annotated[UnknownElement, Tag("unknown")],
    ],
    Discriminator(_element_tag),
]


class Section(_Node):
    """Top-level grid region of a template."""

    type: str
    grid: Grid
    content: list[TemplateElement] = []


class GlobalCalculation(_Node):
    """Named aggregate computed once per render."""

    type: Literal["calculation"] = "calculation"
    name: str
    expression: Expression
    is_global: bool = Field(default=True, alias="isGlobal")


class ParsedTemplate(_Node):
    """Parsed template structure."""

    sections: list[Section] = []
    globals: list[GlobalCalculation] = []


class InvoiceTemplate(_Node):
    """Stored invoice template record."""

    template_id: str = ""
    name: str = ""
    version: int = 0
    dsl: str = ""
    is_default: bool = False
    parsed: ParsedTemplate | None = None


ConditionalElement.model_rebuild()
ListElement.model_rebuild()
Section.model_rebuild()
