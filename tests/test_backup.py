"""Tests for lifesync.storage.backup."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lifesync.models import Dataset
from lifesync.settings import default_settings
from lifesync.storage.backup import (
    BackupError,
    backup_to_dataset,
    dataset_to_backup,
    read_backup,
    write_backup,
)


class TestDatasetToBackup:
    def test_keys(self, sample_dataset: Dataset):
        data = dataset_to_backup(sample_dataset)
        assert "exportedAt" in data
        assert "importantDates" in data
        assert "important_dates" not in data
        assert data["boards"] == [{"id": "board-1", "name": "Main", "columns": ["col-1"]}]
        assert data["columns"] == [{"id": "col-1", "name": "To Do", "storyIds": ["story-1"]}]
        assert data["settings"]["theme"] == "system"

    def test_records_use_wire_names(self, sample_dataset: Dataset):
        story = dataset_to_backup(sample_dataset)["stories"][0]
        assert story["roleId"] == "individual"
        assert story["createdAt"] == "2025-01-06T09:00:00.000Z"
        assert "dueDate" not in story

    def test_no_settings_key_when_unset(self):
        assert "settings" not in dataset_to_backup(Dataset())

    def test_keeps_export_time(self):
        assert dataset_to_backup(Dataset(exported_at="2025-02-01T00:00:00.000Z"))["exportedAt"] == (
            "2025-02-01T00:00:00.000Z"
        )


class TestBackupToDataset:
    def test_round_trip(self, sample_dataset: Dataset):
        restored = backup_to_dataset(dataset_to_backup(sample_dataset))
        restored.exported_at = None
        assert restored == sample_dataset

    def test_absent_keys_are_empty(self):
        dataset = backup_to_dataset({"exportedAt": "2025-01-01T00:00:00.000Z"})
        assert dataset.counts() == {k: 0 for k in dataset.counts()}
        assert dataset.boards == []
        assert dataset.settings is None
        assert dataset.exported_at == "2025-01-01T00:00:00.000Z"

    def test_invalid_records_dropped(self, sample_dataset: Dataset, caplog):
        data = dataset_to_backup(sample_dataset)
        data["stories"].append({"id": "broken", "title": 42})
        with caplog.at_level("WARNING"):
            dataset = backup_to_dataset(data)
        assert [s.id for s in dataset.stories] == ["story-1", "story-2"]
        assert "Dropped 1 invalid stories" in caplog.text

    def test_collection_not_a_list(self):
        assert backup_to_dataset({"goals": {"id": "g"}}).goals == []

    def test_bad_settings_ignored(self):
        assert backup_to_dataset({"settings": {"theme": 1}}).settings is None

    def test_partial_settings_filled_from_defaults(self):
        dataset = backup_to_dataset({"settings": {"theme": "dark", "roles": [], "labels": []}})
        assert dataset.settings.theme == "dark"
        assert dataset.settings.roles == []
        assert dataset.settings.story_types == default_settings().story_types


class TestFiles:
    def test_write_then_read(self, tmp_path: Path, sample_dataset: Dataset):
        path = tmp_path / "backup.json"
        write_backup(path, sample_dataset)
        restored = read_backup(path)
        restored.exported_at = None
        assert restored == sample_dataset

    def test_file_is_json(self, tmp_path: Path, sample_dataset: Dataset):
        path = tmp_path / "backup.json"
        write_backup(path, sample_dataset)
        assert json.loads(path.read_text())["stories"][0]["title"] == "Morning run"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(BackupError, match="not found"):
            read_backup(tmp_path / "nope.json")

    def test_not_json(self, tmp_path: Path):
        path = tmp_path / "backup.json"
        path.write_text("=== STORIES ===\n")
        with pytest.raises(BackupError, match="not valid JSON"):
            read_backup(path)

    def test_not_an_object(self, tmp_path: Path):
        path = tmp_path / "backup.json"
        path.write_text("[1, 2]")
        with pytest.raises(BackupError, match="does not contain a backup object"):
            read_backup(path)
