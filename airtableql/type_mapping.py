from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, List, Optional

import strawberry

from .composites import COMPOSITES
from .core.columns import TypeRef, describe_column
from .models import Column

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .registry import TypeRegistry

_logger = logging.getLogger("airtableql")

_SCALARS = {
    'String': str,
    'Int': int,
    'Float': float,
    'Boolean': bool,
    'ID': strawberry.ID,
}


def _unresolved(table_name: str) -> type:
    """Stand-in for a table missing from the registry.

    Not a Strawberry type: schema construction fails on it.
    """
    return type('UnresolvedTable', (), {'__doc__': f"No table named {table_name!r} in this base"})


def annotation_for(ref: TypeRef, registry: 'TypeRegistry', is_input: bool = False) -> Any:
    if ref.kind == 'composite':
        output_type, input_type = COMPOSITES[ref.name]
        inner: Any = input_type if is_input else output_type
    elif ref.kind == 'table':
        inner = registry.get(ref.name)
        if inner is None:
            _logger.warning("airtableql: foreign key references unknown table %r", ref.name)
            inner = _unresolved(ref.name)
    else:
        inner = _SCALARS.get(ref.name, str)
    if ref.many:
        return Optional[List[Optional[inner]]]
    return Optional[inner]


def map_column(column: Column, registry: 'TypeRegistry', is_input: bool = False) -> Any:
    """Strawberry annotation for a column, in output or input position."""
    behavior = describe_column(column)
    return annotation_for(behavior.input if is_input else behavior.output, registry, is_input)
