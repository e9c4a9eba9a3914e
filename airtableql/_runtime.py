"""Support code copied into every generated resolver module.

Everything here is parsed by :mod:`airtableql.resolvers` and re-emitted
verbatim ahead of ``create_resolvers``, so it may only import the standard
library.

Backend client contract: ``instance.base(base_id).table(table_name)`` returns
a table handle with ``select(page_size=, offset=, filter_by_formula=, sort=)``,
``find(record_id)``, ``create(fields)``, ``update(record_id, fields)`` and
``destroy(record_id)``. Handle methods may be plain or ``async``. Records are
Airtable REST mappings: ``{'id': ..., 'createdTime': ..., 'fields': {...}}``.

``destroy`` signals failure by raising. Its return value only matters when it
carries a ``deleted`` flag (as the REST delete response does); a record,
``None`` or anything else without that flag counts as a successful delete.
``sort`` receives the ``order_by`` keys as the caller wrote them.
"""
import asyncio
import inspect
import logging

_logger = logging.getLogger(__name__)


async def _call(method, *args, **kwargs):
    if inspect.iscoroutinefunction(method):
        return await method(*args, **kwargs)
    result = await asyncio.to_thread(method, *args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result


def _get(record, key, default=None):
    if record is None:
        return default
    if isinstance(record, dict):
        return record.get(key, default)
    return getattr(record, key, default)


def _cell(record, column):
    return (_get(record, 'fields') or {}).get(column)


def _remap(columns, fields):
    return {columns.get(key, key): value for key, value in (fields or {}).items()}


def _sort_pairs(order_by):
    return [
        {'field': key, 'direction': str(getattr(direction, 'value', direction))}
        for key, direction in (order_by or {}).items()
    ]


class _Api:
    def __init__(self, instance, base_id, columns, page_size):
        self._base = instance.base(base_id)
        self._columns = columns
        self._page_size = page_size
        self._tables = {}

    def db(self, table_name):
        # redundant population from concurrent resolvers is harmless
        table = self._tables.get(table_name)
        if table is None:
            table = self._tables[table_name] = self._base.table(table_name)
        return table

    def columns(self, table_name):
        return self._columns.get(table_name, {})

    async def select(self, table_name, limit=None, offset=None, filter_by_formula=None, order_by=None):
        table = self.db(table_name)
        return await _call(
            table.select,
            page_size=self._page_size if limit is None else limit,
            offset=0 if offset is None else offset,
            filter_by_formula=filter_by_formula or '',
            sort=_sort_pairs(order_by),
        )

    async def find(self, table_name, id):
        return await _call(self.db(table_name).find, id)

    async def create(self, table_name, fields=None):
        return await _call(self.db(table_name).create, _remap(self.columns(table_name), fields))

    async def update(self, table_name, id, fields=None):
        return await _call(self.db(table_name).update, id, _remap(self.columns(table_name), fields))

    async def remove(self, table_name, id):
        try:
            result = await _call(self.db(table_name).destroy, id)
        except Exception:
            _logger.warning("delete of %s in %s failed", id, table_name, exc_info=True)
            return False
        deleted = _get(result, 'deleted')
        return True if deleted is None else bool(deleted)


def _root_resolver(method, table_name):
    async def resolve(obj, info=None, **args):
        return await method(table_name, **args)
    return resolve


def _getter(key):
    def resolve(obj, info=None, **args):
        return _get(obj, key)
    return resolve


def _record_id(obj, info=None, **args):
    return _get(obj, 'id')


def _created_at(obj, info=None, **args):
    return _get(obj, 'createdTime')


def _column_resolver(api, spec):
    column = spec['column']
    kind = spec['resolver']
    if kind == 'checkbox':
        def resolve(obj, info=None, **args):
            return _cell(obj, column) or False
    elif kind == 'list':
        def resolve(obj, info=None, **args):
            return _cell(obj, column) or []
    elif kind == 'link_one':
        async def resolve(obj, info=None, **args):
            record_id = _cell(obj, column)
            if not record_id:
                return None
            return await api.find(spec['table'], record_id)
    elif kind == 'link_many':
        async def resolve(obj, info=None, **args):
            ids = _cell(obj, column)
            if not isinstance(ids, list) or not ids:
                return []
            return list(await asyncio.gather(*(api.find(spec['table'], record_id) for record_id in ids)))
    elif kind == 'currency':
        def resolve(obj, info=None, **args):
            value = _cell(obj, column)
            if value is None:
                return None
            return f"{spec.get('symbol') or ''}{value}"
    elif kind == 'percent':
        def resolve(obj, info=None, **args):
            value = _cell(obj, column)
            if value is None:
                return None
            return f"{value}%"
    else:
        def resolve(obj, info=None, **args):
            return _cell(obj, column)
    return resolve
