import json

import pytest

from todolist.csv_codec import CSV_HEADER, is_csv_safe
from todolist.errors import MalformedStorageError
from todolist.repositories import TodoList
from todolist.utils import MAX_ITEM_ID


def sample_list():
    todo_list = TodoList()
    for description in ("Buy milk", "Walk dog", "Read book", "Pay bills"):
        todo_list.insert(description)
    todo_list.update_by_description("walk dog")
    todo_list.remove_by_description("pay bills")
    return todo_list


class TestJson:
    def test_document_shape(self):
        data = json.loads(sample_list().to_json())
        assert set(data) == {"items", "next_id"}
        assert data["next_id"] == 4
        assert data["items"]["walk dog"] == {"id": 1, "description": "walk dog", "done": True}
        assert "pay bills" not in data["items"]

    def test_compact_and_pretty(self):
        todo_list = sample_list()
        compact = todo_list.to_json()
        pretty = todo_list.to_json_pretty()
        assert "\n" not in compact
        assert pretty.startswith("{\n  \"items\"")
        assert json.loads(compact) == json.loads(pretty)

    def test_round_trip(self):
        todo_list = sample_list()
        assert TodoList.from_json(todo_list.to_json()) == todo_list
        assert TodoList.from_json(todo_list.to_json_pretty()) == todo_list

    def test_round_trip_keeps_counter_and_id_index(self):
        restored = TodoList.from_json(sample_list().to_json())
        assert restored.next_id == 4
        assert restored.find_by_id(2).description == "read book"
        assert restored.insert("pay bills") is True
        assert restored.find_by_description("pay bills").id == 4

    def test_empty_round_trip(self):
        restored = TodoList.from_json(TodoList().to_json())
        assert len(restored) == 0
        assert restored.next_id == 0

    @pytest.mark.parametrize(
        "source",
        [
            "",
            "{not json",
            "[]",
            '{"items": {}, "next_id": -1}',
            '{"items": {}, "next_id": "3"}',
            '{"items": {"a": {"id": "0", "description": "a", "done": false}}, "next_id": 1}',
            '{"items": {"a": {"id": 0, "description": "a", "done": "false"}}, "next_id": 1}',
        ],
    )
    def test_invalid_content_is_malformed(self, source):
        with pytest.raises(MalformedStorageError):
            TodoList.from_json(source)

    @pytest.mark.parametrize(
        "items,next_id",
        [
            # key does not match description
            ({"b": {"id": 0, "description": "a", "done": False}}, 1),
            # description not lowercased
            ({"A": {"id": 0, "description": "A", "done": False}}, 1),
            # duplicate ids
            (
                {
                    "a": {"id": 0, "description": "a", "done": False},
                    "b": {"id": 0, "description": "b", "done": False},
                },
                1,
            ),
            # counter not above every id
            ({"a": {"id": 3, "description": "a", "done": False}}, 3),
        ],
    )
    def test_broken_invariants_are_malformed(self, items, next_id):
        source = json.dumps({"items": items, "next_id": next_id})
        with pytest.raises(MalformedStorageError):
            TodoList.from_json(source, origin="todo_list.json")

    def test_error_names_the_origin(self):
        with pytest.raises(MalformedStorageError) as excinfo:
            TodoList.from_json("{", origin="todo_list.json")
        assert excinfo.value.source == "todo_list.json"
        assert "todo_list.json" in str(excinfo.value)


class TestCsv:
    def test_empty_list_is_header_only(self):
        assert TodoList().to_csv() == CSV_HEADER + "\n"

    def test_header_only_parses_to_empty_list(self):
        for source in (CSV_HEADER, CSV_HEADER + "\n", ""):
            restored = TodoList.from_csv(source)
            assert len(restored) == 0
            assert restored.next_id == 0

    def test_rows(self):
        lines = sample_list().to_csv().splitlines()
        assert lines[0] == "Id,Description,Done"
        assert sorted(lines[1:]) == ["0,buy milk,false", "1,walk dog,true", "2,read book,false"]

    def test_round_trip_triples_and_counter(self):
        todo_list = sample_list()
        restored = TodoList.from_csv(todo_list.to_csv())
        triples = {(i.id, i.description, i.done) for i in restored}
        assert triples == {(i.id, i.description, i.done) for i in todo_list}
        # Removed id 3 is forgotten: the counter is rebuilt from the highest id
        assert restored.next_id == 3

    def test_parse_lowercases_and_tolerates_crlf(self):
        source = "Id,Description,Done\r\n5,Buy Milk,true\r\n2,walk dog,false\r\n"
        restored = TodoList.from_csv(source)
        assert restored.next_id == 6
        assert restored.find_by_id(5).description == "buy milk"
        assert restored.find_by_description("BUY MILK").done is True

    def test_blank_lines_are_skipped(self):
        restored = TodoList.from_csv("Id,Description,Done\n\n0,a,false\n\n")
        assert len(restored) == 1

    def test_header_line_is_always_skipped(self):
        restored = TodoList.from_csv("0,first,false\n1,second,true\n")
        assert len(restored) == 1
        assert restored.find_by_id(1).description == "second"

    def test_embedded_comma_lands_in_done_field(self):
        # Only the first two commas split; the rest stays in the last field.
        with pytest.raises(MalformedStorageError):
            TodoList.from_csv("Id,Description,Done\n0,milk, eggs,false\n")

    @pytest.mark.parametrize(
        "row",
        [
            "0,only two",
            "x,milk,false",
            "-1,milk,false",
            "0,milk,yes",
        ],
    )
    def test_malformed_rows(self, row):
        with pytest.raises(MalformedStorageError) as excinfo:
            TodoList.from_csv(f"Id,Description,Done\n{row}\n", origin="todo_list.csv")
        assert "line 2" in excinfo.value.reason

    def test_duplicates_are_malformed(self):
        with pytest.raises(MalformedStorageError):
            TodoList.from_csv("Id,Description,Done\n0,a,false\n0,b,false\n")
        with pytest.raises(MalformedStorageError):
            TodoList.from_csv("Id,Description,Done\n0,a,false\n1,A,false\n")


class TestIdRangeAcrossFormats:
    def test_json_rejects_ids_beyond_32_bits(self):
        source = json.dumps(
            {"items": {"a": {"id": MAX_ITEM_ID + 1, "description": "a", "done": False}}, "next_id": MAX_ITEM_ID + 2}
        )
        with pytest.raises(MalformedStorageError):
            TodoList.from_json(source)

    def test_json_rejects_counter_beyond_range(self):
        with pytest.raises(MalformedStorageError):
            TodoList.from_json(json.dumps({"items": {}, "next_id": MAX_ITEM_ID + 2}))

    def test_largest_id_survives_csv_round_trip(self):
        source = json.dumps(
            {"items": {"a": {"id": MAX_ITEM_ID, "description": "a", "done": True}}, "next_id": MAX_ITEM_ID + 1}
        )
        todo_list = TodoList.from_json(source)
        restored = TodoList.from_csv(todo_list.to_csv())
        assert restored == todo_list


class TestCsvSafety:
    @pytest.mark.parametrize("description", ["buy milk", "", "café; tea"])
    def test_plain_descriptions_are_safe(self, description):
        assert is_csv_safe(description) is True

    @pytest.mark.parametrize("description", ["milk, eggs", "line\nbreak", "carriage\rreturn"])
    def test_commas_and_line_breaks_are_not(self, description):
        assert is_csv_safe(description) is False
