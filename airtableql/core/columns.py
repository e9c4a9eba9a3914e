from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from ..models import Column, ColumnKind, Relation

__all__ = [
    'TypeRef',
    'ColumnBehavior',
    'describe_column',
    'resolver_spec',
    'STRING_NUMBER_FORMATS',
    'PERCENT_FORMATS',
]

# Number formats rendered as text by the column resolver, hence typed String.
PERCENT_FORMATS = frozenset({'percentage', 'percentageV2', 'percent', 'percentV2'})
STRING_NUMBER_FORMATS = frozenset({'currency', 'duration'}) | PERCENT_FORMATS


@dataclass(frozen=True)
class TypeRef:
    """Backend-neutral description of a field type.

    Attributes:
        name: Scalar name (``String``, ``Int``, ``Float``, ``Boolean``, ``ID``),
            composite name (``collaborator``, ``attachment``) or, for
            ``kind == 'table'``, the referenced table's display name.
        kind: One of ``scalar``, ``composite``, ``table``.
        many: True when the field is a list of ``name``.
    """

    name: str
    kind: str = 'scalar'
    many: bool = False


@dataclass(frozen=True)
class ColumnBehavior:
    """Everything the generators need to know about one column variant.

    ``output``/``input`` drive the schema, ``resolver`` and ``params`` drive the
    generated column resolver.
    """

    output: TypeRef
    input: TypeRef
    resolver: str = 'raw'
    params: Tuple[Tuple[str, Any], ...] = ()


STRING = TypeRef('String')
INT = TypeRef('Int')
FLOAT = TypeRef('Float')
BOOLEAN = TypeRef('Boolean')
ID = TypeRef('ID')


def _same(ref: TypeRef, resolver: str = 'raw') -> ColumnBehavior:
    return ColumnBehavior(output=ref, input=ref, resolver=resolver)


def _number(column: Column) -> ColumnBehavior:
    fmt = column.format or ''
    if fmt == 'currency':
        return ColumnBehavior(STRING, STRING, 'currency', (('symbol', column.symbol or ''),))
    if fmt in PERCENT_FORMATS:
        return _same(STRING, 'percent')
    if fmt in STRING_NUMBER_FORMATS:
        return _same(STRING)
    if fmt == 'decimal':
        return _same(FLOAT)
    return _same(INT)


def _foreign_key(column: Column) -> ColumnBehavior:
    many = column.relation is Relation.MANY
    target = TypeRef(column.table or '', kind='table', many=many)
    # input objects cannot embed object types; links are written as record ids
    return ColumnBehavior(
        output=target,
        input=TypeRef('ID', many=many),
        resolver='link_many' if many else 'link_one',
        params=(('table', column.table),),
    )


_BEHAVIORS: Dict[ColumnKind, Callable[[Column], ColumnBehavior]] = {
    ColumnKind.AUTO_NUMBER: lambda c: _same(INT),
    ColumnKind.COUNT: lambda c: _same(INT),
    ColumnKind.RATING: lambda c: _same(INT),
    ColumnKind.CHECKBOX: lambda c: _same(BOOLEAN, 'checkbox'),
    ColumnKind.COLLABORATOR: lambda c: _same(TypeRef('collaborator', kind='composite')),
    ColumnKind.ATTACHMENT: lambda c: _same(TypeRef('attachment', kind='composite', many=True)),
    ColumnKind.FOREIGN_KEY: _foreign_key,
    ColumnKind.NUMBER: _number,
    ColumnKind.MULTI_SELECT: lambda c: _same(TypeRef('String', many=True), 'list'),
}


def describe_column(column: Column) -> ColumnBehavior:
    """Behavior for a column; anything not in the table is a raw String."""
    builder = _BEHAVIORS.get(column.kind)
    if builder is None:
        return _same(STRING)
    return builder(column)


def resolver_spec(column: Column) -> Dict[str, Any]:
    """Literal handed to the generated ``_column_resolver`` for this column."""
    behavior = describe_column(column)
    spec: Dict[str, Any] = {'column': column.name, 'resolver': behavior.resolver}
    spec.update(behavior.params)
    return spec
