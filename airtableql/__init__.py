"""airtableql public API and lightweight lazy exports.

The data model and naming helpers import nothing heavy; Strawberry and black
are only pulled in when a generator is first touched.

Exposes:
- Base, Table, Column, ColumnKind, Relation, load_base, dump_base
- GeneratorConfig
- Lazy: create_schema, print_schema, SchemaAssembler, TypeRegistry,
  create_resolvers_source, ResolverSynthesizer, generate, Artifacts
"""
from __future__ import annotations

from .config import GeneratorConfig
from .models import Base, Column, ColumnKind, Relation, Table, dump_base, load_base

_LAZY = {
    'create_schema': 'registry',
    'print_schema': 'registry',
    'SchemaAssembler': 'registry',
    'TypeRegistry': 'registry',
    'create_resolvers_source': 'resolvers',
    'ResolverSynthesizer': 'resolvers',
    'generate': 'generator',
    'Artifacts': 'generator',
}


def __getattr__(name: str):  # PEP 562 lazy exports
    import importlib as _importlib
    if name in _LAZY:
        module = _importlib.import_module(f"{__name__}.{_LAZY[name]}")
        return getattr(module, name)
    raise AttributeError(name)


__all__ = [
    'Base', 'Table', 'Column', 'ColumnKind', 'Relation', 'load_base', 'dump_base',
    'GeneratorConfig',
    'create_schema', 'print_schema', 'SchemaAssembler', 'TypeRegistry',
    'create_resolvers_source', 'ResolverSynthesizer',
    'generate', 'Artifacts',
]
