"""Tests for the screen controllers using an in-memory gateway."""

import asyncio

import pytest

from core.errors import DataError, NetworkError
from core.models import (
    ChartKind,
    ChatReply,
    FileData,
    InsightsResult,
    UploadedFile,
    UploadResult,
)
from dashboard.components import (
    ChatController,
    InsightsController,
    UploadController,
    VisualizeController,
)
from dashboard.components.chat import CLEARED_MESSAGE, WELCOME_MESSAGE
from dashboard.notifications import NotificationLevel, Notifier


def _file_data(file_id, months, revenue):
    return FileData(
        id=file_id,
        original_name=f"{file_id}.csv",
        columns=[{"name": "Month", "type": "string"}, {"name": "Revenue", "type": "number"}],
        data=[{"Month": m, "Revenue": r} for m, r in zip(months, revenue)],
    )


class FakeGateway:
    """Gateway stand-in; ``gates`` hold file fetches until released."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.gates = {}
        self.error = None
        self.uploads = []
        self.questions = []

    async def list_files(self):
        if self.error:
            raise self.error
        return [UploadedFile(id=f.id, original_name=f.original_name) for f in self.files.values()]

    async def get_file_data(self, file_id):
        gate = self.gates.get(file_id)
        if gate is not None:
            await gate.wait()
        if self.error:
            raise self.error
        return self.files[file_id]

    async def upload_file(self, content, filename, content_type=None):
        if self.error:
            raise self.error
        self.uploads.append(filename)
        self.files["new"] = _file_data("new", ["Jan"], ["1"])
        return UploadResult(file_id="new", file_name=filename)

    async def delete_file(self, file_id):
        if self.error:
            raise self.error
        self.files.pop(file_id)
        return True

    async def generate_insights(self, file_id):
        if self.error:
            raise self.error
        return InsightsResult(file_id=file_id, insights="Revenue is up.")

    async def chat(self, file_id, question):
        if self.error:
            raise self.error
        self.questions.append((file_id, question))
        return ChatReply(file_id=file_id, question=question, answer=f"Answer to {question}")


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def two_files():
    return {
        "a": _file_data("a", ["Jan", "Feb"], ["10", "20"]),
        "b": _file_data("b", ["Jul", "Aug"], ["70", "80"]),
    }


class TestVisualizeController:
    """File selection and chart building."""

    @pytest.mark.asyncio
    async def test_load_defaults_to_first_file(self, two_files, notifier):
        controller = VisualizeController(FakeGateway(two_files), notifier)
        chart_data = await controller.load()
        assert controller.selected_file_id == "a"
        assert [p.name for p in chart_data.bar] == ["Jan", "Feb"]
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_load_uses_requested_file_when_present(self, two_files, notifier):
        controller = VisualizeController(FakeGateway(two_files), notifier)
        await controller.load("b")
        assert controller.selected_file_id == "b"
        await controller.load("zzz")
        assert controller.selected_file_id == "a"

    @pytest.mark.asyncio
    async def test_load_without_files(self, notifier):
        controller = VisualizeController(FakeGateway(), notifier)
        assert await controller.load() is None
        assert controller.is_loading is False
        assert controller.default_chart() == ChartKind.BAR

    @pytest.mark.asyncio
    @pytest.mark.parametrize("release_order", [("a", "b"), ("b", "a")])
    async def test_last_selection_wins(self, two_files, notifier, release_order):
        gateway = FakeGateway(two_files)
        gateway.gates = {"a": asyncio.Event(), "b": asyncio.Event()}
        controller = VisualizeController(gateway, notifier)

        task_a = asyncio.create_task(controller.select("a"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(controller.select("b"))
        await asyncio.sleep(0)

        for file_id in release_order:
            gateway.gates[file_id].set()
            await asyncio.sleep(0)
        result_a, result_b = await asyncio.gather(task_a, task_b)

        assert result_a is None
        assert [p.name for p in result_b.bar] == ["Jul", "Aug"]
        assert controller.chart_data == result_b
        assert controller.file_data.id == "b"
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_fetch_failure_notifies(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        gateway.error = NetworkError("File not found", status=404)
        controller = VisualizeController(gateway, notifier)
        assert await controller.select("a") is None
        assert notifier.last.level == NotificationLevel.ERROR
        assert notifier.last.message == "File not found"
        assert controller.chart_data is None

    @pytest.mark.asyncio
    async def test_export_csv(self, two_files, notifier):
        controller = VisualizeController(FakeGateway(two_files), notifier)
        await controller.select("a")
        filename, content = controller.export_csv()
        assert filename == "a.csv_processed.csv"
        assert content.splitlines() == ["Month,Revenue", "Jan,10", "Feb,20"]

    def test_export_without_file_is_data_error(self, notifier):
        controller = VisualizeController(FakeGateway(), notifier)
        with pytest.raises(DataError):
            controller.export_csv()

    @pytest.mark.asyncio
    async def test_has_data(self, two_files, notifier):
        controller = VisualizeController(FakeGateway(two_files), notifier)
        await controller.select("a")
        assert controller.has_data(ChartKind.BAR)
        assert not controller.has_data(ChartKind.PIE)
        assert controller.default_chart() == ChartKind.BAR


class TestUploadController:
    def test_select_rejects_large_file(self, notifier):
        controller = UploadController(FakeGateway(), notifier)
        accepted = controller.select_file("big.csv", b"x" * (12 * 1024 * 1024))
        assert accepted is False
        assert controller.selected_upload is None
        assert notifier.last.level == NotificationLevel.WARNING

    def test_select_rejects_wrong_type(self, notifier):
        controller = UploadController(FakeGateway(), notifier)
        assert controller.select_file("report.pdf", b"%PDF") is False
        assert "CSV or Excel" in notifier.last.message

    @pytest.mark.asyncio
    async def test_upload_requires_selection(self, notifier):
        gateway = FakeGateway()
        controller = UploadController(gateway, notifier)
        assert await controller.upload() is None
        assert notifier.last.message == "Please select a file first"
        assert gateway.uploads == []

    @pytest.mark.asyncio
    async def test_upload_success_refreshes_list(self, notifier):
        gateway = FakeGateway()
        controller = UploadController(gateway, notifier)
        assert controller.select_file("sales.csv", b"a,b\n1,2\n")
        result = await controller.upload()
        assert result.file_id == "new"
        assert controller.selected_upload is None
        assert controller.is_uploading is False
        assert [f.id for f in controller.files] == ["new"]
        assert notifier.last.level == NotificationLevel.SUCCESS

    @pytest.mark.asyncio
    async def test_upload_failure_notifies(self, notifier):
        gateway = FakeGateway()
        gateway.error = NetworkError("Only CSV and Excel files are allowed", status=400)
        controller = UploadController(gateway, notifier)
        controller.select_file("sales.csv", b"a\n1\n")
        assert await controller.upload() is None
        assert notifier.last.message == "Only CSV and Excel files are allowed"
        assert controller.selected_upload is not None
        assert controller.is_uploading is False

    @pytest.mark.asyncio
    async def test_delete(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        controller = UploadController(gateway, notifier)
        await controller.load_files()
        assert await controller.delete("a") is True
        assert [f.id for f in controller.files] == ["b"]
        assert notifier.last.message == "File deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_failure(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        gateway.error = NetworkError("", status=500)
        controller = UploadController(gateway, notifier)
        assert await controller.delete("a") is False
        assert notifier.last.level == NotificationLevel.ERROR


class TestInsightsController:
    @pytest.mark.asyncio
    async def test_requires_selection(self, notifier):
        controller = InsightsController(FakeGateway(), notifier)
        assert await controller.generate() is None
        assert notifier.last.level == NotificationLevel.WARNING

    @pytest.mark.asyncio
    async def test_generate(self, two_files, notifier):
        controller = InsightsController(FakeGateway(two_files), notifier)
        await controller.load_files()
        assert await controller.generate() == "Revenue is up."
        assert controller.generated is True
        assert notifier.last.message == "Insights generated successfully!"

    @pytest.mark.asyncio
    async def test_generate_failure(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        controller = InsightsController(gateway, notifier)
        await controller.load_files()
        gateway.error = NetworkError("quota exceeded")
        assert await controller.generate() is None
        assert notifier.last.message == "Error generating insights: quota exceeded"
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_list_failure_notifies(self, notifier):
        gateway = FakeGateway()
        gateway.error = NetworkError("backend down")
        controller = InsightsController(gateway, notifier)
        assert await controller.load_files() == []
        assert notifier.last.message == "Error loading files: backend down"


class TestChatController:
    def test_starts_with_welcome(self, notifier):
        controller = ChatController(FakeGateway(), notifier)
        assert [m.content for m in controller.messages] == [WELCOME_MESSAGE]

    @pytest.mark.asyncio
    async def test_blank_message_is_ignored(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        controller = ChatController(gateway, notifier)
        await controller.load_files()
        assert await controller.send("   ") is None
        assert gateway.questions == []

    @pytest.mark.asyncio
    async def test_requires_selected_file(self, notifier):
        controller = ChatController(FakeGateway(), notifier)
        assert await controller.send("hello") is None
        assert notifier.last.message == "Please select a file first"
        assert len(controller.messages) == 1

    @pytest.mark.asyncio
    async def test_send_appends_exchange(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        controller = ChatController(gateway, notifier)
        await controller.load_files()
        reply = await controller.send(" Total revenue? ")
        assert reply.content == "Answer to Total revenue?"
        assert [m.role for m in controller.messages] == ["assistant", "user", "assistant"]
        assert gateway.questions == [("a", "Total revenue?")]
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_error_becomes_assistant_message(self, two_files, notifier):
        gateway = FakeGateway(two_files)
        controller = ChatController(gateway, notifier)
        await controller.load_files()
        gateway.error = NetworkError("AI service unavailable")
        reply = await controller.send("why?")
        assert reply.content == "Sorry, I encountered an error: AI service unavailable"
        assert notifier.last.level == NotificationLevel.ERROR

    def test_clear(self, notifier):
        controller = ChatController(FakeGateway(), notifier)
        controller.clear()
        assert [m.content for m in controller.messages] == [CLEARED_MESSAGE]


class TestNotifier:
    def test_durations_and_listeners(self):
        notifier = Notifier(max_history=2)
        seen = []
        notifier.subscribe(seen.append)
        notifier.success("saved")
        notifier.error("failed")
        notifier.warning("careful")
        assert seen[0].duration_ms == 3000
        assert seen[1].duration_ms == 5000
        assert seen[2].duration_ms == 3000
        assert [n.message for n in notifier.history] == ["failed", "careful"]
