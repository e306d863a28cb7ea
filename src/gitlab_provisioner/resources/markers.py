"""``Annotated`` markers that give resource fields extra meaning.

``Ref`` says a field points at another declared resource. ``Compare`` tells
the up-to-date check how to treat a field. The ``collect_*`` helpers read
the markers back from a model class or instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pydantic.fields import FieldInfo

M = TypeVar("M")
CompareStrategy: TypeAlias = Literal["exact", "ignore"]


@dataclass(frozen=True, slots=True)
class Ref:
    """Marks a field naming another resource, optionally of one ``resource_type``."""

    resource_type: str | None = None


@dataclass(frozen=True, slots=True)
class Compare:
    """``"exact"`` fields are compared; ``"ignore"`` fields never are."""

    strategy: CompareStrategy


@dataclass(frozen=True, slots=True)
class ResourceRef:
    """A reference found on a resource instance."""

    name: str
    resource_type: str | None = None


def _model_class(model_or_cls: Any) -> type[BaseModel]:
    return model_or_cls if isinstance(model_or_cls, type) else type(model_or_cls)


def _marked(model_or_cls: Any, marker_type: type[M]) -> Iterator[tuple[str, M]]:
    """Yield ``(field_name, marker)`` for fields annotated with *marker_type*."""
    fields: dict[str, FieldInfo] = _model_class(model_or_cls).model_fields
    for name, info in fields.items():
        marker = next((m for m in info.metadata if isinstance(m, marker_type)), None)
        if marker is not None:
            yield name, marker


def _names_in(value: Any) -> Iterator[str]:
    # A plain name, a model with a ``name`` (e.g. ``Reference``), or a list of those.
    if isinstance(value, list):
        for item in value:
            yield from _names_in(item)
    elif isinstance(value, str):
        yield value
    elif isinstance(getattr(value, "name", None), str):
        yield value.name


def collect_ref_specs(resource: BaseModel) -> list[ResourceRef]:
    """References on *resource* and on the models nested in it."""
    found = [
        ResourceRef(name=name, resource_type=ref.resource_type)
        for field, ref in _marked(resource, Ref)
        for name in _names_in(getattr(resource, field))
    ]
    for field in type(resource).model_fields:
        nested = getattr(resource, field)
        if isinstance(nested, BaseModel):
            found += collect_ref_specs(nested)
    return found


def collect_compare_strategies(model_or_cls: Any) -> dict[str, CompareStrategy]:
    return {field: marker.strategy for field, marker in _marked(model_or_cls, Compare)}


def collect_ignored_fields(model_or_cls: Any) -> frozenset[str]:
    """Fields marked ``Compare("ignore")``."""
    strategies = collect_compare_strategies(model_or_cls)
    return frozenset(field for field, strategy in strategies.items() if strategy == "ignore")
