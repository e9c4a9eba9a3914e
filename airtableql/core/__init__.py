# Core building blocks shared by the schema assembler and the resolver synthesizer.
from .naming import normalize, to_type, to_field, singular, distinct_tables
from .columns import TypeRef, ColumnBehavior, describe_column, resolver_spec

__all__ = [
    'normalize', 'to_type', 'to_field', 'singular', 'distinct_tables',
    'TypeRef', 'ColumnBehavior', 'describe_column', 'resolver_spec',
]
