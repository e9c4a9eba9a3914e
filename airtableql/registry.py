from __future__ import annotations
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import strawberry
from strawberry import UNSET

from .config import DEFAULT_CONFIG, GeneratorConfig
from .core.naming import distinct_tables, singular, to_field, to_type
from .core.utils import SortDirection
from .models import Base, Table
from .type_mapping import map_column

_logger = logging.getLogger("airtableql")

__all__ = [
    'TypeRegistry',
    'SchemaAssembler',
    'create_schema',
    'print_schema',
]

_ID_DESCRIPTION = "Unique ID of the record"
_CREATED_AT_DESCRIPTION = "UTC time at the record creation."

# (python attribute, GraphQL name, annotation, description)
_FieldSpec = Tuple[str, str, Any, Optional[str]]


class TypeRegistry:
    """Table display name -> generated object type.

    Classes are allocated empty for every table before any field is typed, so
    a foreign key may point at a table that comes later in the base. Display
    names that normalize to the same type name share one class.
    """

    def __init__(self):
        self._types: Dict[str, type] = {}
        self._by_type_name: Dict[str, type] = {}

    def allocate(self, table_name: str, type_name: str) -> type:
        cls = self._by_type_name.get(type_name)
        if cls is None:
            cls = type(type_name, (), {'__doc__': f"Records of the Airtable table {table_name!r}"})
            cls.__module__ = __name__
            self._by_type_name[type_name] = cls
        self._types[table_name] = cls
        return cls

    def get(self, table_name: str) -> Optional[type]:
        return self._types.get(table_name)

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


def _unbound(field_name: str) -> NotImplementedError:
    return NotImplementedError(
        f"'{field_name}' has no executable resolver in the assembled schema; "
        "bind the module produced by airtableql.resolvers instead"
    )


def _list_resolver(field_name: str, item_type: Any, order_type: Any):
    def resolve(limit=UNSET, offset=UNSET, filter_by_formula=UNSET, order_by=UNSET):
        raise _unbound(field_name)
    resolve.__annotations__ = {
        'limit': Optional[int],
        'offset': Optional[int],
        'filter_by_formula': Optional[str],
        'order_by': Optional[order_type],
        'return': Optional[List[Optional[item_type]]],
    }
    return resolve


def _by_pk_resolver(field_name: str, item_type: Any):
    def resolve(id):
        raise _unbound(field_name)
    resolve.__annotations__ = {'id': strawberry.ID, 'return': Optional[item_type]}
    return resolve


def _insert_resolver(field_name: str, item_type: Any, fields_type: Any):
    def resolve(fields=UNSET):
        raise _unbound(field_name)
    resolve.__annotations__ = {'fields': Optional[fields_type], 'return': Optional[item_type]}
    return resolve


def _update_resolver(field_name: str, item_type: Any, fields_type: Any):
    def resolve(id, fields=UNSET):
        raise _unbound(field_name)
    resolve.__annotations__ = {
        'id': strawberry.ID,
        'fields': Optional[fields_type],
        'return': Optional[item_type],
    }
    return resolve


def _delete_resolver(field_name: str):
    def resolve(id):
        raise _unbound(field_name)
    resolve.__annotations__ = {'id': strawberry.ID, 'return': Optional[bool]}
    return resolve


def _materialize(cls: type, fields: Sequence[_FieldSpec], *, is_input: bool) -> None:
    """Attach annotations and Strawberry fields to an allocated class.

    Specs sharing a GraphQL name collapse to the last one, kept in the slot
    of the first.
    """
    by_name: Dict[str, _FieldSpec] = {}
    for spec in fields:
        by_name[spec[1]] = spec
    annotations: Dict[str, Any] = {}
    for attr, graphql_name, annotation, description in by_name.values():
        annotations[attr] = annotation
        setattr(cls, attr, strawberry.field(
            name=graphql_name,
            description=description,
            default=UNSET if is_input else None,
        ))
    cls.__annotations__ = annotations


def _input_stem(table: Table) -> str:
    """Prefix of a table's ``_order_by``/``_fields`` input names."""
    return singular(to_type(table.name))


def _root_type(class_name: str, graphql_name: str, fields: Dict[str, Any]) -> type:
    namespace: Dict[str, Any] = {'__module__': __name__, '__annotations__': {}}
    for index, (field_name, resolver) in enumerate(fields.items()):
        namespace[f'field_{index}'] = strawberry.field(resolver=resolver, name=field_name)
    return strawberry.type(type(class_name, (), namespace), name=graphql_name)


class SchemaAssembler:
    """Build the Strawberry schema for one Airtable base.

    Pass one allocates a class per table in :attr:`registry`; pass two types
    every field (foreign keys resolve through the registry, so order of
    tables does not matter), then the per-table input types and the two roots
    are built on top.

    Anything that ends up sharing a GraphQL name (tables, root fields, input
    types, columns) keeps the later definition in the slot of the first, the
    same rule the resolver synthesizer follows.
    """

    def __init__(self, base: Base, config: Optional[GeneratorConfig] = None):
        self.base = base
        self.config = config or DEFAULT_CONFIG
        self.registry = TypeRegistry()
        self._order_inputs: Dict[str, type] = {}
        self._fields_inputs: Dict[str, type] = {}
        self.tables: List[Table] = distinct_tables(base.tables)

    # ---------- Passes ----------
    def _allocate(self) -> None:
        # every display name gets a slot, so links to a shadowed table still resolve
        for table in self.base.tables:
            self.registry.allocate(table.name, to_type(table.name))
            _logger.debug("airtableql: allocated type %s for table %r", to_type(table.name), table.name)

    def _populate(self, table: Table) -> None:
        cls = self.registry.get(table.name)
        fields: List[_FieldSpec] = [
            ('record_id', '_id', Optional[strawberry.ID], _ID_DESCRIPTION),
            ('created_at', '_createdAt', Optional[str], _CREATED_AT_DESCRIPTION),
        ]
        for index, column in enumerate(table.columns):
            fields.append((f'column_{index}', to_field(column.name), map_column(column, self.registry), None))
        _materialize(cls, fields, is_input=False)
        strawberry.type(cls, name=to_type(table.name))

    def _order_by_input(self, table: Table) -> type:
        type_name = f"{_input_stem(table)}_order_by"
        cls = type(type_name, (), {'__module__': __name__})
        fields: List[_FieldSpec] = [('id', 'id', Optional[SortDirection], None)]
        for index, column in enumerate(table.columns):
            fields.append((f'column_{index}', to_field(column.name), Optional[SortDirection], None))
        _materialize(cls, fields, is_input=True)
        return strawberry.input(cls, name=type_name)

    def _fields_input(self, table: Table) -> type:
        type_name = f"{_input_stem(table)}_fields"
        cls = type(type_name, (), {'__module__': __name__})
        fields: List[_FieldSpec] = [
            (f'column_{index}', to_field(column.name), map_column(column, self.registry, is_input=True), None)
            for index, column in enumerate(table.columns)
        ]
        _materialize(cls, fields, is_input=True)
        return strawberry.input(cls, name=type_name)

    def _inputs(self) -> None:
        owners: Dict[str, Table] = {}
        for table in self.tables:
            owners[_input_stem(table)] = table
        for stem, table in owners.items():
            self._order_inputs[stem] = self._order_by_input(table)
            self._fields_inputs[stem] = self._fields_input(table)

    def _query_root(self) -> type:
        fields: Dict[str, Any] = {}
        for table in self.tables:
            item_type = self.registry.get(table.name)
            field_name = to_field(table.name)
            order_type = self._order_inputs[_input_stem(table)]
            by_pk = f"{singular(field_name)}_by_pk"
            fields[field_name] = _list_resolver(field_name, item_type, order_type)
            fields[by_pk] = _by_pk_resolver(by_pk, item_type)
        return _root_type('Query', 'query_root', fields)

    def _mutation_root(self) -> type:
        fields: Dict[str, Any] = {}
        for table in self.tables:
            item_type = self.registry.get(table.name)
            name = singular(to_field(table.name))
            fields_type = self._fields_inputs[_input_stem(table)]
            fields[f"insert_{name}"] = _insert_resolver(f"insert_{name}", item_type, fields_type)
            fields[f"update_{name}"] = _update_resolver(f"update_{name}", item_type, fields_type)
            fields[f"delete_{name}"] = _delete_resolver(f"delete_{name}")
        return _root_type('Mutation', 'mutation_root', fields)

    def build(self) -> strawberry.Schema:
        self._allocate()
        for table in self.tables:
            self._populate(table)
        self._inputs()
        query = self._query_root()
        mutation = self._mutation_root()
        _logger.info("airtableql: assembled schema for base %s (%d tables)", self.base.id, len(self.tables))
        return strawberry.Schema(query=query, mutation=mutation, config=self.config.strawberry_config())


def create_schema(base: Base, config: Optional[GeneratorConfig] = None) -> strawberry.Schema:
    return SchemaAssembler(base, config).build()


def print_schema(base: Base, config: Optional[GeneratorConfig] = None) -> str:
    """SDL text of the schema generated for ``base``."""
    return create_schema(base, config).as_str()
