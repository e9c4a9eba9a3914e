"""Identifier normalization shared by the schema and resolver generators.

Airtable table and column names are free text. GraphQL names are not, so both
generators run every display name through these helpers; using the same
functions on both sides is what keeps schema field ``X`` and resolver key ``X``
identical.
"""
from __future__ import annotations

import re
from typing import Iterable, List, TypeVar

import inflection

__all__ = [
    'normalize',
    'to_type',
    'to_field',
    'singular',
    'distinct_tables',
]

T = TypeVar('T')

_non_word_pattern = re.compile(r'\W', re.ASCII)
# acronym run, capitalized or lower word, digit run
_word_pattern = re.compile(r'[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+')


def normalize(name: str) -> str:
    """Drop every character outside ASCII letters, digits and underscore."""
    if not name:
        return ''
    return _non_word_pattern.sub('', str(name))


def to_type(name: str) -> str:
    """Object type name for a table: stripped, case untouched."""
    return normalize(name)


def to_field(name: str) -> str:
    """Field/argument/resolver key: stripped, then lowerCamelCase.

    Word boundaries are underscores, lower-to-upper transitions, the end of an
    acronym run (``HTTPServer`` -> ``http``, ``Server``) and digit runs.
    """
    words = []
    for part in normalize(name).split('_'):
        words.extend(_word_pattern.findall(part))
    if not words:
        return ''
    first = words[0].lower()
    rest = ''.join(w[0].upper() + w[1:].lower() for w in words[1:])
    return first + rest


def singular(name: str) -> str:
    """English singular of an identifier (``tasks`` -> ``task``)."""
    if not name:
        return name
    return inflection.singularize(name)


def distinct_tables(tables: Iterable[T]) -> List[T]:
    """Tables keyed by GraphQL type name; a later table replaces an earlier
    one in its slot (``My Table`` then ``My-Table`` keeps ``My-Table``)."""
    return list({to_type(t.name): t for t in tables}.values())
