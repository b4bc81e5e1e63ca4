import json
import os
import stat
import threading
import pytest
from unittest.mock import Mock, patch

from hubexport.core.models import Hub, IndexEntry
from hubexport.export.aggregator import ExportAggregator
from hubexport.export.service import (
    ExportGate,
    ExportOutcome,
    ExportWriter,
    export_file_path,
    export_indexes,
)
from hubexport.utils.error_handler import ErrorCode, ExportWriteError

from conftest import FakeWebhooks

ACME = Hub(id="h1", name="Acme")


class TestExportFilePath:

    def test_builds_name_from_hub(self, tmp_path):
        assert export_file_path(str(tmp_path), ACME) == os.path.join(str(tmp_path), "indexes-h1-Acme.json")

    def test_trailing_separator_is_ignored(self, tmp_path):
        assert export_file_path(str(tmp_path) + os.sep, ACME) == os.path.join(str(tmp_path), "indexes-h1-Acme.json")

    def test_directory_parts_in_hub_name_are_stripped(self, tmp_path):
        hub = Hub(id="h1", name="team/Acme")
        assert export_file_path(str(tmp_path), hub) == os.path.join(str(tmp_path), "Acme.json")

    def test_json_suffix_not_doubled(self, tmp_path):
        hub = Hub(id="h1", name="Acme.json")
        assert export_file_path(str(tmp_path), hub).endswith("indexes-h1-Acme.json")


class TestExportGate:

    def test_new_file_needs_no_confirmation(self, tmp_path):
        confirm = Mock()
        assert ExportGate(confirm).approve(str(tmp_path / "new.json"))
        confirm.assert_not_called()

    def test_existing_file_asks_and_respects_answer(self, tmp_path):
        target = tmp_path / "existing.json"
        target.write_text("[]")

        assert ExportGate(Mock(return_value=True)).approve(str(target))
        confirm = Mock(return_value=False)
        assert not ExportGate(confirm).approve(str(target))
        confirm.assert_called_once_with(f"Do you want to overwrite {target}?")

    def test_force_skips_prompt(self, tmp_path):
        target = tmp_path / "existing.json"
        target.write_text("[]")
        confirm = Mock()
        assert ExportGate(confirm, force=True).approve(str(target))
        confirm.assert_not_called()

    @pytest.mark.parametrize("answer,expected", [("y", True), ("YES", True), ("n", False), ("", False)])
    def test_default_prompt_reads_terminal(self, tmp_path, answer, expected):
        target = tmp_path / "existing.json"
        target.write_text("[]")
        with patch("builtins.input", return_value=answer):
            assert ExportGate().approve(str(target)) is expected


class TestExportWriter:

    def entry(self, **overrides):
        fields = dict(id="i1", index_details={"id": "i1", "name": "Main"}, settings={"replicas": []})
        fields.update(overrides)
        return IndexEntry(**fields)

    def test_writes_json_array(self, tmp_path):
        target = tmp_path / "out" / "indexes.json"
        ExportWriter().write(str(target), [self.entry()])

        written = json.loads(target.read_text(encoding="utf-8"))
        assert written == [{
            "id": "i1",
            "indexDetails": {"id": "i1", "name": "Main"},
            "settings": {"replicas": []},
            "replicasSettings": [],
            "activeContentWebhook": None,
            "archivedContentWebhook": None,
        }]

    def test_replaces_existing_file(self, tmp_path):
        target = tmp_path / "indexes.json"
        target.write_text("stale")
        ExportWriter().write(str(target), [])
        assert json.loads(target.read_text()) == []

    def test_new_file_gets_umask_default_mode(self, tmp_path):
        target = tmp_path / "indexes.json"
        previous = os.umask(0o022)
        try:
            ExportWriter().write(str(target), [])
        finally:
            os.umask(previous)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_replaced_file_keeps_its_mode(self, tmp_path):
        target = tmp_path / "indexes.json"
        target.write_text("stale")
        target.chmod(0o640)
        ExportWriter().write(str(target), [])
        assert stat.S_IMODE(target.stat().st_mode) == 0o640

    def test_unserializable_document_leaves_existing_file_alone(self, tmp_path):
        target = tmp_path / "indexes.json"
        target.write_text("previous")

        with pytest.raises(ExportWriteError) as exc_info:
            ExportWriter().write(str(target), [self.entry(settings={"bad": object()})])

        assert exc_info.value.code == ErrorCode.WRITE
        assert target.read_text() == "previous"
        assert os.listdir(tmp_path) == ["indexes.json"]

    def test_filesystem_error_is_wrapped(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ExportWriteError, match="Unable to write file"):
            ExportWriter().write(str(blocker / "indexes.json"), [])


class TestExportIndexes:

    @pytest.mark.asyncio
    async def test_acme_scenario_writes_expected_file(self, tmp_path, acme_directory, acme_webhooks):
        aggregator = ExportAggregator(acme_directory, acme_webhooks)

        outcome = await export_indexes(ACME, str(tmp_path), aggregator, ExportGate(Mock()))

        assert outcome is ExportOutcome.EXPORTED
        written = json.loads((tmp_path / "indexes-h1-Acme.json").read_text())
        assert [e["id"] for e in written] == ["i1"]
        assert written[0]["replicasSettings"][0]["id"] == "i2"
        assert written[0]["indexDetails"]["assignedContentTypes"][0]["contentTypeUri"] == \
            "https://schema.example.com/blog.json"
        assert written[0]["activeContentWebhook"] == {"objectID": "{{id}}"}

    @pytest.mark.asyncio
    async def test_declined_overwrite_writes_nothing(self, tmp_path, acme_directory, acme_webhooks):
        target = tmp_path / "indexes-h1-Acme.json"
        target.write_text("keep me")
        aggregator = ExportAggregator(acme_directory, acme_webhooks)

        outcome = await export_indexes(ACME, str(tmp_path), aggregator, ExportGate(Mock(return_value=False)))

        assert outcome is ExportOutcome.NOTHING_EXPORTED
        assert target.read_text() == "keep me"

    @pytest.mark.asyncio
    async def test_fetch_failure_writes_no_file(self, tmp_path, acme_directory):
        aggregator = ExportAggregator(acme_directory, FakeWebhooks(fail=True))

        with pytest.raises(RuntimeError):
            await export_indexes(ACME, str(tmp_path), aggregator, ExportGate(Mock()))

        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_overwrite_prompt_runs_off_the_event_loop_thread(self, tmp_path, acme_directory, acme_webhooks):
        (tmp_path / "indexes-h1-Acme.json").write_text("previous")
        prompt_threads = []

        def confirm(question):
            prompt_threads.append(threading.current_thread())
            return True

        aggregator = ExportAggregator(acme_directory, acme_webhooks)
        outcome = await export_indexes(ACME, str(tmp_path), aggregator, ExportGate(confirm))

        assert outcome is ExportOutcome.EXPORTED
        assert prompt_threads and prompt_threads[0] is not threading.current_thread()
