"""Unit tests for loading and saving the task file."""

import json
import pytest
import yaml
from pathlib import Path
from unittest.mock import patch

from todoline.data import TaskFile, from_records, read_records, to_records, atomic_write, DATA_YAML, DATA_JSON
from todoline.data.io import load_document
from todoline.models import Priority
from todoline.recovery import CorruptionError, FatalError, FileOperationError
from todoline.store import TaskStore


def sample_tasks():
    store = TaskStore()
    store.add_task("Write report")
    store.add_task("Buy milk")
    store.add_subtask(0, "Outline")
    store.add_subtask(0, "Draft")
    store.toggle_completion(0, 1)
    store.toggle_completion(1)
    store.increase_priority(1)
    store.decrease_priority(0)
    return store.tasks


class TestTaskFile:
    """Test TaskFile load/save."""

    @pytest.mark.parametrize("name", ["tasks.yml", "tasks.json"])
    def test_round_trip(self, tmp_path, name):
        """Test save then load reproduces the same collection."""
        tasks = sample_tasks()
        task_file = TaskFile(tmp_path / name)
        task_file.save_state(tasks)

        loaded = task_file.load_state()
        assert loaded == tasks
        assert [t.description for t in loaded] == ["Write report", "Buy milk"]
        assert loaded[0].priority == Priority.LOW
        assert loaded[1].priority == Priority.HIGH
        assert [s.completed for s in loaded[0].subtasks] == [False, True]

    def test_json_suffix_writes_json(self, tmp_path):
        path = tmp_path / "tasks.json"
        TaskFile(path).save_state(sample_tasks())
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[1] == {"description": "Buy milk", "completed": True, "priority": "high", "subtasks": []}

    def test_yaml_layout(self, tmp_path):
        path = tmp_path / "tasks.yml"
        TaskFile(path).save_state(sample_tasks())
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0]["subtasks"][0] == {"description": "Outline", "completed": False, "priority": "normal"}

    def test_missing_file_is_empty(self, tmp_path):
        assert TaskFile(tmp_path / "absent.yml").load_state() == []

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "tasks.yml"
        TaskFile(path).save_state(sample_tasks())
        assert path.exists()

    def test_corrupt_file_is_set_aside(self, tmp_path):
        """Test an unparsable file loads as empty and is copied aside."""
        path = tmp_path / "tasks.json"
        path.write_text("{not json", encoding="utf-8")

        assert TaskFile(path).load_state() == []
        backup = tmp_path / "tasks.json.corrupt"
        assert backup.read_text(encoding="utf-8") == "{not json"

    def test_wrong_shape_is_set_aside_before_save(self, tmp_path):
        """Test a parsable file of the wrong shape survives the next save as a copy."""
        path = tmp_path / "tasks.yml"
        original = "todo:\n  - description: Important\n"
        path.write_text(original, encoding="utf-8")

        task_file = TaskFile(path)
        store = TaskStore(task_file.load_state())
        assert len(store) == 0
        store.add_task("new")
        task_file.save_state(store.tasks)

        assert (tmp_path / "tasks.yml.corrupt").read_text(encoding="utf-8") == original
        assert [t.description for t in task_file.load_state()] == ["new"]

    def test_bad_field_keeps_task_and_subtasks(self, tmp_path):
        """Test an uncoercible completion flag falls back instead of dropping the task."""
        path = tmp_path / "tasks.yml"
        path.write_text("- description: Keep me\n  completed: maybe\n  subtasks: [a, b]\n", encoding="utf-8")

        loaded = TaskFile(path).load_state()
        assert [t.description for t in loaded] == ["Keep me"]
        assert loaded[0].completed is False
        assert [s.description for s in loaded[0].subtasks] == ["a", "b"]
        assert not (tmp_path / "tasks.yml.corrupt").exists()

    def test_skipped_record_sets_file_aside(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps([{"description": "A"}, 5]), encoding="utf-8")

        loaded = TaskFile(path).load_state()
        assert [t.description for t in loaded] == ["A"]
        assert (tmp_path / "tasks.json.corrupt").exists()

    def test_clean_file_is_not_set_aside(self, tmp_path):
        path = tmp_path / "tasks.yml"
        TaskFile(path).save_state(sample_tasks())
        TaskFile(path).load_state()
        assert not (tmp_path / "tasks.yml.corrupt").exists()

    def test_unreadable_file_is_empty(self, tmp_path):
        path = tmp_path / "tasks.yml"
        path.write_text("[]", encoding="utf-8")
        with patch("todoline.data.core.load_document", side_effect=FileOperationError("denied")):
            assert TaskFile(path).load_state() == []

    def test_original_json_format(self, tmp_path):
        """Test files written by the original tool load with defaults."""
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps([
            {"description": "Old task", "isCompleted": True},
            {"description": "Other", "isCompleted": False},
        ]), encoding="utf-8")

        loaded = TaskFile(path).load_state()
        assert [(t.description, t.completed, t.priority) for t in loaded] == [
            ("Old task", True, Priority.NORMAL),
            ("Other", False, Priority.NORMAL),
        ]
        assert loaded[0].subtasks == []


class TestRecords:
    """Test tolerant record coercion."""

    def test_mapping_with_tasks_key(self):
        tasks = from_records({"tasks": [{"description": "A"}]})
        assert [t.description for t in tasks] == ["A"]

    def test_empty_documents(self):
        assert from_records(None) == []
        assert from_records({}) == []
        assert from_records("just text") == []

    def test_bad_records_are_skipped(self):
        tasks, discarded = read_records([
            {"description": "good", "priority": "low "},
            42,
            "bare string",
            {"description": "kept", "completed": "maybe"},
        ])
        assert [t.description for t in tasks] == ["good", "bare string", "kept"]
        assert tasks[0].priority == Priority.LOW
        assert tasks[2].completed is False
        assert discarded is True

    def test_clean_document_discards_nothing(self):
        tasks, discarded = read_records([{"description": "A"}, "B"])
        assert [t.description for t in tasks] == ["A", "B"]
        assert discarded is False
        assert read_records(None) == ([], False)
        assert read_records({}) == ([], False)

    def test_wrong_shapes_are_discarded(self):
        assert read_records({"todo": [{"description": "A"}]}) == ([], True)
        assert read_records({"tasks": "A"}) == ([], True)
        assert read_records(7) == ([], True)

    def test_to_records_uses_enum_tokens(self):
        records = to_records(sample_tasks())
        assert records[0]["priority"] == "low"
        assert records[0]["subtasks"][1]["completed"] is True


class TestIO:
    """Test the low-level file helpers."""

    def test_unserializable_data_is_fatal(self, tmp_path):
        path = tmp_path / "tasks.json"
        with pytest.raises(FatalError):
            atomic_write(DATA_JSON, path, [object()])
        assert not path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_unknown_format_is_fatal(self, tmp_path):
        with pytest.raises(FatalError):
            atomic_write(99, tmp_path / "tasks.txt", [])

    def test_missing_directory_without_create_dirs(self, tmp_path):
        with pytest.raises(FileOperationError):
            atomic_write(DATA_YAML, tmp_path / "missing" / "tasks.yml", [])

    def test_overwrite_replaces_content(self, tmp_path):
        path = tmp_path / "tasks.yml"
        atomic_write(DATA_YAML, path, [{"description": "first"}])
        atomic_write(DATA_YAML, path, [])
        assert yaml.safe_load(path.read_text(encoding="utf-8")) == []

    def test_load_document_syntax_error(self, tmp_path):
        path = tmp_path / "tasks.yml"
        path.write_text("a: [unclosed", encoding="utf-8")
        with pytest.raises(CorruptionError):
            load_document(path)

    def test_load_document_missing(self, tmp_path):
        assert load_document(Path(tmp_path / "none.yml")) is None
