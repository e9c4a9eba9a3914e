"""Behaviour of the generated resolver module against an in-memory client."""

import pytest

from tests.fixtures import FakeClient, FakeTable, SyncFakeTable, record, sample_tables


def task(tables, record_id="rec1"):
    return tables["Tasks"].records[record_id]


@pytest.mark.asyncio
async def test_list_query_passes_paging_and_sort(resolvers, tables):
    rows = await resolvers["query_root"]["people"](None, None, order_by={"age": "desc", "name": "asc"})
    assert [r["id"] for r in rows] == ["recA"]
    op, kwargs = tables["People"].calls[-1]
    assert op == "select"
    assert kwargs == {
        "page_size": 100,
        "offset": 0,
        "filter_by_formula": "",
        "sort": [{"field": "age", "direction": "desc"}, {"field": "name", "direction": "asc"}],
    }


@pytest.mark.asyncio
async def test_sort_keys_are_passed_through_as_given(resolvers, tables):
    await resolvers["query_root"]["tasks"](
        None, None, limit=2, offset=1, filter_by_formula="{Done}", order_by={"dueDate": "asc", "id": "desc"})
    _, kwargs = tables["Tasks"].calls[-1]
    assert kwargs["page_size"] == 2
    assert kwargs["offset"] == 1
    assert kwargs["filter_by_formula"] == "{Done}"
    assert kwargs["sort"] == [{"field": "dueDate", "direction": "asc"}, {"field": "id", "direction": "desc"}]


@pytest.mark.asyncio
async def test_by_pk(resolvers):
    found = await resolvers["query_root"]["person_by_pk"](None, None, id="recA")
    assert found["fields"]["Name"] == "Ada"


@pytest.mark.asyncio
async def test_insert_and_update_remap_field_names(resolvers, tables):
    created = await resolvers["mutation_root"]["insert_task"](
        None, None, fields={"name": "New", "dueDate": "2024-03-01", "timeSpent": 60})
    assert tables["Tasks"].calls[-1] == ("create", {"Name": "New", "Due Date!": "2024-03-01", "Time Spent": 60})
    assert created["id"] == "recNew1"

    updated = await resolvers["mutation_root"]["update_task"](None, None, id="rec2", fields={"done": True})
    assert tables["Tasks"].calls[-1] == ("update", "rec2", {"Done": True})
    assert updated["fields"]["Done"] is True


@pytest.mark.asyncio
async def test_delete_reports_success_and_swallows_failures(resolvers, tables, caplog):
    delete = resolvers["mutation_root"]["delete_task"]
    assert await delete(None, None, id="rec5") is True
    assert "rec5" not in tables["Tasks"].records
    with caplog.at_level("WARNING"):
        assert await delete(None, None, id="rec5") is False
    assert "rec5" in caplog.text


class RecordReturningTable(FakeTable):
    async def destroy(self, record_id):
        self.calls.append(("destroy", record_id))
        return self.records.pop(record_id)


class SilentTable(FakeTable):
    def destroy(self, record_id):
        self.records.pop(record_id)


class RefusingTable(FakeTable):
    async def destroy(self, record_id):
        return {"id": record_id, "deleted": False}


@pytest.mark.asyncio
@pytest.mark.parametrize("table_cls,expected", [
    (RecordReturningTable, True),
    (SilentTable, True),
    (RefusingTable, False),
])
async def test_delete_result_without_flag_counts_as_success(resolver_module, table_cls, expected):
    tables = sample_tables()
    tables["Tasks"] = table_cls("Tasks", [record("rec1", {"Name": "Write docs"})])
    resolvers = resolver_module.create_resolvers(FakeClient(tables))
    assert await resolvers["mutation_root"]["delete_task"](None, None, id="rec1") is expected


@pytest.mark.asyncio
async def test_many_link_keeps_input_order(resolvers, tables):
    linked = await resolvers["Tasks"]["subtasks"](task(tables))
    # rec2 is the slower lookup but still comes first
    assert [r["id"] for r in linked] == ["rec2", "rec5"]


@pytest.mark.asyncio
async def test_one_link_resolves_against_related_table(resolvers, tables):
    project = await resolvers["Tasks"]["project"](task(tables))
    assert project["id"] == "recP1"
    assert ("find", "recP1") in tables["Projects"].calls
    assert await resolvers["Tasks"]["project"](task(tables, "rec2")) is None


@pytest.mark.asyncio
async def test_many_link_without_a_list_is_empty(resolvers):
    subtasks = resolvers["Tasks"]["subtasks"]
    assert await subtasks(record("recX", {})) == []
    assert await subtasks(record("recX", {"Subtasks": []})) == []
    assert await subtasks(record("recX", {"Subtasks": "rec2"})) == []


def test_cell_resolvers(resolvers, tables):
    fields = resolvers["Tasks"]
    full, bare = task(tables), task(tables, "rec2")
    assert fields["name"](full) == "Write docs"
    assert fields["done"](full) is True
    assert fields["done"](bare) is False
    assert fields["tags"](full) == ["feature"]
    assert fields["tags"](bare) == []
    assert fields["budget"](full) == "$12"
    assert fields["budget"](bare) is None
    assert fields["progress"](full) == "50%"
    assert fields["progress"](bare) is None
    assert fields["timeSpent"](full) == 3600
    assert fields["points"](full) == 3
    assert fields["dueDate"](full) == "2024-02-01"
    assert fields["mystery"](full) is None


def test_record_metadata_resolvers(resolvers, tables):
    rec = task(tables)
    assert resolvers["Tasks"]["_id"](rec) == "rec1"
    assert resolvers["Tasks"]["_createdAt"](rec) == "2024-01-01T00:00:00.000Z"


def test_composite_getters(resolvers, tables):
    owner = resolvers["Tasks"]["owner"](task(tables))
    collaborator = resolvers["airtable_collaborator"]
    assert [collaborator[f](owner) for f in ("id", "email", "name")] == ["usr1", "a@example.com", "Ann"]
    assert resolvers["airtable_attachment_thumbnail"]["url"]({"url": "https://x"}) == "https://x"
    assert resolvers["airtable_attachment"]["thumbnails"]({}) is None


@pytest.mark.asyncio
async def test_table_handles_are_opened_once(resolvers, client, tables):
    await resolvers["query_root"]["tasks"](None, None)
    await resolvers["query_root"]["task_by_pk"](None, None, id="rec1")
    await resolvers["Tasks"]["subtasks"](task(tables))
    assert client.base_ids == ["appTEST123"]
    assert client.opened.count("Tasks") == 1


@pytest.mark.asyncio
async def test_blocking_client_methods_are_supported(resolver_module):
    tables = sample_tables()
    tables["Projects"] = SyncFakeTable("Projects", [record("recP1", {"Name": "Handbook"})])
    resolvers = resolver_module.create_resolvers(FakeClient(tables))
    project = await resolvers["Tasks"]["project"](tables["Tasks"].records["rec1"])
    assert project["fields"]["Name"] == "Handbook"
