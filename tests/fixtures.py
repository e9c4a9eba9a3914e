"""Sample bases and an in-memory backend client shared by the tests."""

import asyncio
import importlib.util
import itertools

import pytest

from airtableql.models import Base


RAW_BASE = {
    "id": "appTEST123",
    "tables": [
        {
            "name": "Tasks",
            "columns": [
                {"name": "Name", "type": "text", "options": {}},
                {"name": "Notes", "type": "multilineText", "options": {}},
                {"name": "Done", "type": "checkbox", "options": {}},
                {"name": "Owner", "type": "collaborator", "options": {}},
                {"name": "Files", "type": "multipleAttachment", "options": {}},
                {"name": "Priority", "type": "rating", "options": {}},
                {"name": "Estimate", "type": "number", "options": {"format": "decimal", "symbol": None}},
                {"name": "Budget", "type": "number", "options": {"format": "currency", "symbol": "$"}},
                {"name": "Progress", "type": "number", "options": {"format": "percentV2", "symbol": None}},
                {"name": "Time Spent", "type": "number", "options": {"format": "duration", "symbol": None}},
                {"name": "Points", "type": "number", "options": {"format": "integer", "symbol": None}},
                {"name": "Tags", "type": "multiSelect", "options": {"choices": ["bug", "feature"]}},
                {"name": "Status", "type": "select", "options": {"choices": ["Todo", "Done"]}},
                {"name": "Due Date!", "type": "date", "options": {"format": "l"}},
                # forward reference: Projects is declared after Tasks
                {"name": "Project", "type": "foreignKey", "options": {"relationship": "one", "table": "Projects"}},
                {"name": "Subtasks", "type": "foreignKey", "options": {"relation": "many", "table": "Tasks"}},
                {"name": "Mystery", "type": "formula", "options": {}},
            ],
        },
        {
            "name": "Projects",
            "columns": [
                {"name": "Name", "type": "text", "options": {}},
                {"name": "Tasks", "type": "foreignKey", "options": {"relation": "many", "table": "Tasks"}},
                {"name": "Task Count", "type": "count", "options": {}},
                {"name": "Number", "type": "autoNumber", "options": {}},
            ],
        },
        {
            "name": "People",
            "columns": [
                {"name": "Name", "type": "text", "options": {}},
                {"name": "Age", "type": "number", "options": {"format": "integer", "symbol": None}},
            ],
        },
    ],
}


def record(record_id, fields, created="2024-01-01T00:00:00.000Z"):
    return {"id": record_id, "createdTime": created, "fields": fields}


class FakeTable:
    """Async in-memory table handle. ``delays`` slows chosen finds down."""

    def __init__(self, name, records=(), delays=None):
        self.name = name
        self.records = {r["id"]: r for r in records}
        self.delays = dict(delays or {})
        self.calls = []
        self._ids = itertools.count(1)

    async def select(self, page_size, offset, filter_by_formula, sort):
        self.calls.append(("select", {
            "page_size": page_size,
            "offset": offset,
            "filter_by_formula": filter_by_formula,
            "sort": sort,
        }))
        rows = list(self.records.values())
        return rows[offset:offset + page_size]

    async def find(self, record_id):
        self.calls.append(("find", record_id))
        await asyncio.sleep(self.delays.get(record_id, 0))
        return self.records[record_id]

    async def create(self, fields):
        self.calls.append(("create", fields))
        new = record(f"recNew{next(self._ids)}", dict(fields))
        self.records[new["id"]] = new
        return new

    async def update(self, record_id, fields):
        self.calls.append(("update", record_id, fields))
        current = self.records[record_id]
        current["fields"].update(fields)
        return current

    async def destroy(self, record_id):
        self.calls.append(("destroy", record_id))
        if record_id not in self.records:
            raise KeyError(record_id)
        del self.records[record_id]
        return {"id": record_id, "deleted": True}


class SyncFakeTable(FakeTable):
    """Blocking flavour, like a plain requests-based client."""

    def find(self, record_id):
        self.calls.append(("find", record_id))
        return self.records[record_id]


class FakeBase:
    def __init__(self, tables):
        self.tables = tables
        self.opened = []

    def table(self, name):
        self.opened.append(name)
        return self.tables.setdefault(name, FakeTable(name))


class FakeClient:
    def __init__(self, tables):
        self.base_ids = []
        self._base = FakeBase(tables)

    def base(self, base_id):
        self.base_ids.append(base_id)
        return self._base

    @property
    def opened(self):
        return self._base.opened


def sample_tables():
    return {
        "Tasks": FakeTable("Tasks", [
            record("rec1", {
                "Name": "Write docs",
                "Done": True,
                "Budget": 12,
                "Progress": 50,
                "Time Spent": 3600,
                "Points": 3,
                "Tags": ["feature"],
                "Due Date!": "2024-02-01",
                "Project": "recP1",
                "Subtasks": ["rec2", "rec5"],
                "Owner": {"id": "usr1", "email": "a@example.com", "name": "Ann"},
            }),
            record("rec2", {"Name": "Outline"}),
            record("rec5", {"Name": "Review"}),
        ], delays={"rec2": 0.05}),
        "Projects": FakeTable("Projects", [
            record("recP1", {"Name": "Handbook", "Tasks": ["rec1"]}),
        ]),
        "People": FakeTable("People", [
            record("recA", {"Name": "Ada", "Age": 36}),
        ]),
    }


def load_generated(source, directory, name="generated_resolvers"):
    """Import generated resolver source the way a host project would."""
    path = directory / f"{name}.py"
    path.write_text(source, encoding="utf-8")
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def raw_base():
    return RAW_BASE


@pytest.fixture
def base():
    return Base.from_dict(RAW_BASE)


@pytest.fixture
def tables():
    return sample_tables()


@pytest.fixture
def client(tables):
    return FakeClient(tables)
