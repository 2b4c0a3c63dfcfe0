import asyncio
from typing import List, Optional

import pytest
from textual.widgets import ContentSwitcher, Input, TextArea

from thttp.app import FIELD_KINDS, HttpTesterApp, ResponsePanelWidget
from thttp.models import Failure, Outcome, PendingRequest, Response
from thttp.session import FieldKind, UIState


class FakeDispatcher:
    """Stands in for execute_request; blocks forever when outcome is None."""

    def __init__(self, outcome: Optional[Outcome] = None) -> None:
        self.outcome = outcome
        self.requests: List[PendingRequest] = []
        self.timeouts: List[float] = []

    async def __call__(self, request: PendingRequest, timeout: float) -> Outcome:
        self.requests.append(request)
        self.timeouts.append(timeout)
        if self.outcome is None:
            await asyncio.Event().wait()
        return self.outcome


@pytest.fixture
def dispatcher(monkeypatch):
    fake = FakeDispatcher(Response(200, "200 OK", {}, '{"a":1}', 12.0))
    monkeypatch.setattr("thttp.app.execute_request", fake)
    return fake


async def settle(app, pilot) -> None:
    await app.workers.wait_for_complete()
    await pilot.pause()


def current_view(app) -> str:
    return app.query_one(ContentSwitcher).current


@pytest.mark.asyncio
async def test_starts_composing_with_url_focused(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.session.state is UIState.COMPOSING
        assert current_view(app) == "compose-view"
        assert app.focused.id == "url-field"
        assert app.query_one("#url-field", Input).value == "https://httpbin.org/get"
        assert app.query_one("#method-field", Input).value == "GET"
        headers = app.query_one("#headers-field", TextArea)
        body = app.query_one("#body-field", TextArea)
        assert headers.placeholder == "Content-Type: application/json"
        assert body.placeholder == "Request body (for POST/PUT)"


@pytest.mark.asyncio
async def test_tab_and_shift_tab_cycle_focus(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("tab")
        await pilot.pause()
        assert app.focused.id == "method-field"

        await pilot.press("shift+tab", "shift+tab")
        await pilot.pause()
        assert app.focused.id == "body-field"
        assert app.session.focused is FieldKind.BODY

        await pilot.press("tab")
        await pilot.pause()
        assert app.focused.id == "url-field"


@pytest.mark.asyncio
async def test_send_with_empty_url_does_nothing(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        app.query_one("#url-field", Input).value = ""
        await pilot.pause()
        await pilot.press("enter")
        await settle(app, pilot)

        assert app.session.state is UIState.COMPOSING
        assert current_view(app) == "compose-view"
        assert dispatcher.requests == []


@pytest.mark.asyncio
async def test_send_with_empty_method_uses_get(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("tab")
        app.query_one("#method-field", Input).value = ""
        await pilot.pause()
        await pilot.press("ctrl+s")
        await settle(app, pilot)

        assert len(dispatcher.requests) == 1
        request = dispatcher.requests[0]
        assert request.method == "GET"
        assert request.url == "https://httpbin.org/get"
        assert request.body is None
        assert dispatcher.timeouts == [30.0]
        assert app.session.state is UIState.DISPLAYING
        assert current_view(app) == "response-view"


@pytest.mark.asyncio
async def test_failure_then_back_keeps_fields(dispatcher):
    dispatcher.outcome = Failure(error="timed out")
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("tab", "tab", "tab")
        await pilot.press("h", "i")
        await pilot.pause()
        await pilot.press("enter")
        await settle(app, pilot)

        assert dispatcher.requests[0].body == "hi"
        assert app.session.outcome == Failure(error="timed out")
        assert current_view(app) == "response-view"
        shown = app.query_one(ResponsePanelWidget).rendered.plain
        assert "❌ Error: timed out" in shown

        await pilot.press("ctrl+b")
        await pilot.pause()

        assert app.session.state is UIState.COMPOSING
        assert current_view(app) == "compose-view"
        assert app.focused.id == "body-field"
        assert app.query_one("#body-field", TextArea).text == "hi"
        assert app.query_one("#url-field", Input).value == "https://httpbin.org/get"


@pytest.mark.asyncio
async def test_keys_are_ignored_while_sending(dispatcher):
    dispatcher.outcome = None
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("enter")
        await pilot.pause()
        assert app.session.state is UIState.SENDING
        assert current_view(app) == "loading-view"

        await pilot.press("tab", "ctrl+b", "enter", "x")
        await pilot.pause()

        assert app.session.state is UIState.SENDING
        assert len(dispatcher.requests) == 1
        assert app.focused is None or app.focused.id not in FIELD_KINDS
        await pilot.press("q")
    assert app.return_code == 0


@pytest.mark.asyncio
async def test_quit_while_composing(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("q")
    assert app.return_code == 0


@pytest.mark.asyncio
async def test_quit_while_displaying(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("enter")
        await settle(app, pilot)
        assert app.session.state is UIState.DISPLAYING
        await pilot.press("escape")
    assert app.return_code == 0


@pytest.mark.asyncio
async def test_url_change_is_sent_after_tab(dispatcher):
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        app.query_one("#url-field", Input).value = "http://new.example/"
        await pilot.press("tab")
        await pilot.press("enter")
        await settle(app, pilot)

        assert [request.url for request in dispatcher.requests] == ["http://new.example/"]


@pytest.mark.asyncio
async def test_unparseable_number_body_is_displayed_raw(dispatcher):
    dispatcher.outcome = Response(200, "200 OK", {}, "1" * 5000, 3.0)
    app = HttpTesterApp()
    async with app.run_test() as pilot:
        await pilot.press("enter")
        await settle(app, pilot)

        assert app.session.state is UIState.DISPLAYING
        shown = app.query_one(ResponsePanelWidget).rendered.plain
        assert "Response Body:\n" + "1" * 1000 + "..." in shown
        await pilot.press("q")
    assert app.return_code == 0
