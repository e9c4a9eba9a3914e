"""Immutable snapshot of an Airtable base schema.

The generators never talk to Airtable: they consume a :class:`Base` value,
however it was obtained (scraped, cached JSON, hand-written fixture). This
module defines that value and its JSON round trip.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = [
    'ColumnKind',
    'Relation',
    'Column',
    'Table',
    'Base',
    'load_base',
    'dump_base',
]


class ColumnKind(str, Enum):
    TEXT = 'text'
    MULTILINE_TEXT = 'multilineText'
    ATTACHMENT = 'multipleAttachment'
    AUTO_NUMBER = 'autoNumber'
    CHECKBOX = 'checkbox'
    COLLABORATOR = 'collaborator'
    COUNT = 'count'
    DATE = 'date'
    MULTI_SELECT = 'multiSelect'
    NUMBER = 'number'
    RATING = 'rating'
    SELECT = 'select'
    FOREIGN_KEY = 'foreignKey'
    UNKNOWN = 'unknown'


# Spellings seen upstream that name the same variant.
_KIND_ALIASES = {
    'attachment': ColumnKind.ATTACHMENT,
}


class Relation(str, Enum):
    ONE = 'one'
    MANY = 'many'


def _require(raw: Any, key: str, what: str) -> Any:
    if not isinstance(raw, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(raw).__name__}")
    if key not in raw or raw[key] is None:
        raise ValueError(f"{what} is missing required key '{key}'")
    return raw[key]


@dataclass(frozen=True)
class Column:
    """One typed column of a table.

    ``type`` is kept verbatim from upstream so unknown variants survive a
    round trip; :attr:`kind` is the closed enumeration the generators switch on.
    Variant data lives in the optional attributes and is only meaningful for
    the variants that carry it (``format`` for date/number, ``symbol`` for
    number, ``choices`` for select/multiSelect, ``relation``/``table`` for
    foreignKey).
    """

    name: str
    type: str
    format: Optional[str] = None
    symbol: Optional[str] = None
    choices: Tuple[str, ...] = ()
    relation: Optional[Relation] = None
    table: Optional[str] = None

    @property
    def kind(self) -> ColumnKind:
        try:
            return ColumnKind(self.type)
        except ValueError:
            return _KIND_ALIASES.get(self.type, ColumnKind.UNKNOWN)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'Column':
        name = _require(raw, 'name', 'column')
        col_type = str(_require(raw, 'type', f"column '{name}'"))
        options = raw.get('options')
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ValueError(f"options of column '{name}' must be a mapping")
        column = cls(name=str(name), type=col_type)
        kind = column.kind
        if kind is ColumnKind.UNKNOWN:
            logger.debug("column %r has unrecognized type %r", name, col_type)
        if kind in (ColumnKind.SELECT, ColumnKind.MULTI_SELECT):
            return cls(name=column.name, type=col_type, choices=tuple(str(c) for c in options.get('choices') or ()))
        if kind is ColumnKind.NUMBER:
            return cls(name=column.name, type=col_type, format=options.get('format'), symbol=options.get('symbol'))
        if kind is ColumnKind.DATE:
            return cls(name=column.name, type=col_type, format=options.get('format'))
        if kind is ColumnKind.FOREIGN_KEY:
            # the docs scraper emits 'relationship', the typed shape says 'relation'
            raw_rel = options.get('relation', options.get('relationship'))
            try:
                relation = Relation(raw_rel) if raw_rel is not None else Relation.ONE
            except ValueError:
                raise ValueError(f"column '{name}' has invalid relation {raw_rel!r}") from None
            return cls(name=column.name, type=col_type, relation=relation, table=options.get('table'))
        return column

    def options(self) -> Dict[str, Any]:
        kind = self.kind
        if kind in (ColumnKind.SELECT, ColumnKind.MULTI_SELECT):
            return {'choices': list(self.choices)}
        if kind is ColumnKind.NUMBER:
            return {'format': self.format, 'symbol': self.symbol}
        if kind is ColumnKind.DATE:
            return {'format': self.format}
        if kind is ColumnKind.FOREIGN_KEY:
            relation = self.relation.value if self.relation is not None else None
            return {'relation': relation, 'table': self.table}
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'type': self.type, 'options': self.options()}


@dataclass(frozen=True)
class Table:
    name: str
    columns: Tuple[Column, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'Table':
        name = _require(raw, 'name', 'table')
        columns = _require(raw, 'columns', f"table '{name}'")
        if isinstance(columns, (str, bytes, Mapping)):
            raise ValueError(f"columns of table '{name}' must be a list")
        return cls(name=str(name), columns=tuple(Column.from_dict(c) for c in columns))

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'columns': [c.to_dict() for c in self.columns]}


@dataclass(frozen=True)
class Base:
    """Root value fed to both generators: one complete Airtable base."""

    id: str
    tables: Tuple[Table, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'Base':
        base_id = _require(raw, 'id', 'base')
        tables = _require(raw, 'tables', f"base '{base_id}'")
        if isinstance(tables, (str, bytes, Mapping)):
            raise ValueError(f"tables of base '{base_id}' must be a list")
        return cls(id=str(base_id), tables=tuple(Table.from_dict(t) for t in tables))

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'tables': [t.to_dict() for t in self.tables]}

    def table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None


def load_base(text: str) -> Base:
    """Parse a base from its JSON serialization."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid base JSON: {e}") from e
    return Base.from_dict(raw)


def dump_base(base: Base) -> str:
    """Serialize a base the way the schema loader caches it (two-space indent)."""
    return json.dumps(base.to_dict(), indent=2, ensure_ascii=False)
