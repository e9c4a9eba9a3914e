"""Resolver module synthesis.

The generated module is assembled as a Python AST rather than by pasting
strings: values taken from the base (table and column names, currency
symbols, the base id) only ever enter the tree as ``ast.Constant`` nodes, so
quoting is the unparser's job. The runtime helpers in
:mod:`airtableql._runtime` are parsed from source and spliced in ahead of the
generated ``create_resolvers`` entry point. Rendering goes through
``ast.unparse`` and then black, which makes the text a pure function of the
base and the config.

Shape of the generated map::

    {
        'query_root': {'tasks': ..., 'task_by_pk': ...},
        'mutation_root': {'insert_task': ..., 'update_task': ..., 'delete_task': ...},
        'airtable_attachment_thumbnail': {...},   # plain getters
        ...
        'Tasks': {'_id': ..., '_createdAt': ..., 'name': ..., ...},
    }

Keys are produced by the same naming helpers the schema assembler uses, and
keys that collide keep the later table or column in the slot of the first,
as in the schema.
"""
from __future__ import annotations
import ast
import inspect
import logging
from typing import Any, Dict, List, Optional

import black

from . import _runtime
from .composites import COMPOSITE_OUTPUT_FIELDS
from .config import DEFAULT_CONFIG, GeneratorConfig
from .core.columns import resolver_spec
from .core.naming import distinct_tables, singular, to_field, to_type
from .models import Base, Table

_logger = logging.getLogger("airtableql")

__all__ = [
    'ResolverSynthesizer',
    'create_resolvers_source',
]

_ENTRY_POINT = '''
def create_resolvers(instance):
    """Resolver map for this base, bound to a connected backend client."""
    api = _Api(instance, BASE_ID, COLUMNS, PAGE_SIZE)
    return RESOLVERS
'''

_EXPORTS = "__all__ = ['create_resolvers']"


def _literal(value: Any) -> ast.expr:
    """AST for a JSON-like value."""
    if isinstance(value, dict):
        return ast.Dict(keys=[_literal(k) for k in value], values=[_literal(v) for v in value.values()])
    if isinstance(value, (list, tuple)):
        return ast.List(elts=[_literal(v) for v in value], ctx=ast.Load())
    if value is None or isinstance(value, (str, int, float, bool)):
        return ast.Constant(value=value)
    raise TypeError(f"Cannot embed {type(value).__name__} in generated source")


def _name(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Load())


def _call(func: str, *args: ast.expr) -> ast.Call:
    return ast.Call(func=_name(func), args=list(args), keywords=[])


def _api_method(method: str) -> ast.Attribute:
    return ast.Attribute(value=_name('api'), attr=method, ctx=ast.Load())


def _mapping(entries: Dict[str, ast.expr]) -> ast.Dict:
    return ast.Dict(keys=[ast.Constant(value=k) for k in entries], values=list(entries.values()))


def _assign(target: str, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[ast.Name(id=target, ctx=ast.Store())], value=value)


class _FillResolvers(ast.NodeTransformer):
    def __init__(self, resolvers: ast.expr):
        self.resolvers = resolvers

    def visit_Name(self, node: ast.Name) -> ast.AST:
        if node.id == 'RESOLVERS':
            return self.resolvers
        return node


class ResolverSynthesizer:
    """Emit the source of a self-contained resolver module for one base."""

    def __init__(self, base: Base, config: Optional[GeneratorConfig] = None):
        self.base = base
        self.config = config or DEFAULT_CONFIG
        self._query: Dict[str, ast.expr] = {}
        self._mutation: Dict[str, ast.expr] = {}
        self._types: Dict[str, ast.expr] = {}
        self._columns: Dict[str, Dict[str, str]] = {}

    def _add_table(self, table: Table) -> None:
        field_name = to_field(table.name)
        name = singular(field_name)
        table_name = ast.Constant(value=table.name)
        self._columns[table.name] = {to_field(c.name): c.name for c in table.columns}

        self._query[field_name] = _call('_root_resolver', _api_method('select'), table_name)
        self._query[f"{name}_by_pk"] = _call('_root_resolver', _api_method('find'), table_name)
        self._mutation[f"insert_{name}"] = _call('_root_resolver', _api_method('create'), table_name)
        self._mutation[f"update_{name}"] = _call('_root_resolver', _api_method('update'), table_name)
        self._mutation[f"delete_{name}"] = _call('_root_resolver', _api_method('remove'), table_name)

        fields: Dict[str, ast.expr] = {
            '_id': _name('_record_id'),
            '_createdAt': _name('_created_at'),
        }
        for column in table.columns:
            fields[to_field(column.name)] = _call('_column_resolver', _name('api'), _literal(resolver_spec(column)))
        self._types[to_type(table.name)] = _mapping(fields)

    def _resolver_map(self) -> ast.Dict:
        entries: Dict[str, ast.expr] = {
            'query_root': _mapping(self._query),
            'mutation_root': _mapping(self._mutation),
        }
        for type_name, field_names in COMPOSITE_OUTPUT_FIELDS.items():
            entries[type_name] = _mapping({f: _call('_getter', ast.Constant(value=f)) for f in field_names})
        entries.update(self._types)
        return _mapping(entries)

    def _runtime_body(self) -> List[ast.stmt]:
        body = ast.parse(inspect.getsource(_runtime)).body
        # the runtime's own docstring describes the template, not the output
        if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
            body = body[1:]
        return body

    def module(self) -> ast.Module:
        self._query, self._mutation, self._types, self._columns = {}, {}, {}, {}
        for table in distinct_tables(self.base.tables):
            self._add_table(table)
        docstring = (
            f"GraphQL resolvers for Airtable base {self.base.id}.\n\n"
            "Generated by airtableql from the base schema; regenerate instead of editing.\n"
        )
        entry_point = _FillResolvers(self._resolver_map()).visit(ast.parse(_ENTRY_POINT))
        body: List[ast.stmt] = [ast.Expr(value=ast.Constant(value=docstring))]
        body.extend(self._runtime_body())
        body.extend(ast.parse(_EXPORTS).body)
        body.append(_assign('BASE_ID', ast.Constant(value=self.base.id)))
        body.append(_assign('PAGE_SIZE', ast.Constant(value=self.config.page_size)))
        body.append(_assign('COLUMNS', _literal(self._columns)))
        body.extend(entry_point.body)
        return ast.fix_missing_locations(ast.Module(body=body, type_ignores=[]))

    def render(self) -> str:
        source = ast.unparse(self.module()) + '\n'
        if self.config.format_source:
            source = black.format_str(source, mode=black.Mode(line_length=self.config.line_length))
        _logger.info(
            "airtableql: generated resolvers for base %s (%d tables, %d bytes)",
            self.base.id, len(self.base.tables), len(source),
        )
        return source


def create_resolvers_source(base: Base, config: Optional[GeneratorConfig] = None) -> str:
    """Source text of a module exposing ``create_resolvers(instance)``."""
    return ResolverSynthesizer(base, config).render()
