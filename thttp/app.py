import logging
from typing import Dict, Optional, Union

from rich.text import Text
from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.message import Message
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import (
    ContentSwitcher,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from thttp.config import DEFAULT_SETTINGS, Settings
from thttp.http_client import execute_request
from thttp.models import Outcome, PendingRequest
from thttp.render import render_outcome
from thttp.session import FieldKind, SessionController, UIState

logger = logging.getLogger(__name__)

SPINNER_FRAMES = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")

FIELD_IDS: Dict[FieldKind, str] = {
    FieldKind.URL: "url-field",
    FieldKind.METHOD: "method-field",
    FieldKind.HEADERS: "headers-field",
    FieldKind.BODY: "body-field",
}
FIELD_KINDS: Dict[str, FieldKind] = {
    widget_id: kind for kind, widget_id in FIELD_IDS.items()
}

VIEW_IDS: Dict[UIState, str] = {
    UIState.COMPOSING: "compose-view",
    UIState.SENDING: "loading-view",
    UIState.DISPLAYING: "response-view",
}

FIELD_CSS = """
{name} {{
    border: solid #585858;
}}

{name}:focus {{
    border: solid #ff5faf;
}}
"""


class RequestCompleted(Message):
    """Posted once by the dispatch worker when the outcome is known."""

    def __init__(self, outcome: Outcome) -> None:
        super().__init__()
        self.outcome = outcome


class UrlField(Input):
    DEFAULT_CSS = FIELD_CSS.format(name="UrlField")


class MethodField(Input):
    DEFAULT_CSS = (
        FIELD_CSS.format(name="MethodField")
        + """
    MethodField {
        width: 24;
    }
    """
    )


class HeadersField(TextArea):
    DEFAULT_CSS = (
        FIELD_CSS.format(name="HeadersField")
        + """
    HeadersField {
        height: 6;
    }
    """
    )


class BodyField(TextArea):
    DEFAULT_CSS = (
        FIELD_CSS.format(name="BodyField")
        + """
    BodyField {
        height: 8;
    }
    """
    )


EditField = Union[UrlField, MethodField, HeadersField, BodyField]


def _field_value(widget: Widget) -> str:
    if isinstance(widget, TextArea):
        return widget.text
    return widget.value


class ComposeView(VerticalScroll):
    can_focus = False


class SpinnerWidget(Static):
    DEFAULT_CSS = """
    SpinnerWidget {
        padding: 2 3;
        color: #ff5faf;
    }
    """

    def __init__(self, interval: float, **kwargs) -> None:
        super().__init__(**kwargs)
        self.interval = interval
        self.frame = 0
        self._timer: Optional[Timer] = None

    def start(self) -> None:
        self.frame = 0
        self._show_frame()
        if self._timer is None:
            self._timer = self.set_interval(self.interval, self._advance)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _advance(self) -> None:
        self.frame = (self.frame + 1) % len(SPINNER_FRAMES)
        self._show_frame()

    def _show_frame(self) -> None:
        self.update(f"{SPINNER_FRAMES[self.frame]} Making HTTP request...")


class ResponsePanelWidget(VerticalScroll):
    can_focus = True
    DEFAULT_CSS = """
    ResponsePanelWidget {
        border: round #0087d7;
        padding: 1 2;
    }
    """

    def __init__(self, limit: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.limit = limit
        self.rendered: Optional[Text] = None

    def compose(self) -> ComposeResult:
        yield Static(id="response-content")

    def set_content(self, outcome: Outcome) -> None:
        self.rendered = render_outcome(outcome, self.limit)
        self.query_one("#response-content", Static).update(self.rendered)
        self.scroll_home(animate=False)


class HttpTesterApp(App):
    TITLE = "🌐 HTTP Endpoint Tester"

    BINDINGS = [
        Binding("q,escape,ctrl+c", "quit", "Quit", priority=True),
        Binding("enter,ctrl+s", "send", "Send", priority=True),
        Binding("tab", "focus_field(1)", "Next", priority=True),
        Binding("shift+tab", "focus_field(-1)", "Prev", priority=True),
        Binding("ctrl+b", "back", "Back", priority=True),
    ]

    CSS = """
    Screen {
        layout: vertical;
    }

    #views {
        height: 1fr;
    }

    #compose-view {
        padding: 0 1;
    }

    .field-label {
        margin-top: 1;
    }

    .help {
        margin-top: 1;
        color: $text-muted;
    }

    #response-panel {
        height: 1fr;
    }
    """

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        super().__init__()
        self.settings = settings
        self.session = SessionController(settings)

    def compose(self) -> ComposeResult:
        fields = self.session.fields
        yield Header()
        with ContentSwitcher(id="views", initial=VIEW_IDS[UIState.COMPOSING]):
            with ComposeView(id=VIEW_IDS[UIState.COMPOSING]):
                yield Label("URL:", classes="field-label")
                yield UrlField(
                    value=fields[FieldKind.URL],
                    placeholder="Enter URL here...",
                    max_length=self.settings.url_max_length,
                    id=FIELD_IDS[FieldKind.URL],
                )
                yield Label("Method:", classes="field-label")
                yield MethodField(
                    value=fields[FieldKind.METHOD],
                    placeholder="GET",
                    max_length=self.settings.method_max_length,
                    id=FIELD_IDS[FieldKind.METHOD],
                )
                yield Label(
                    "Headers (one per line, format: Key: Value):",
                    classes="field-label",
                )
                yield HeadersField(
                    fields[FieldKind.HEADERS],
                    placeholder="Content-Type: application/json",
                    id=FIELD_IDS[FieldKind.HEADERS],
                )
                yield Label("Request Body:", classes="field-label")
                yield BodyField(
                    fields[FieldKind.BODY],
                    placeholder="Request body (for POST/PUT)",
                    id=FIELD_IDS[FieldKind.BODY],
                )
                yield Static(
                    "📝 Tab/Shift+Tab: switch fields | Enter/Ctrl+S: send request | Q: quit",
                    classes="help",
                )
            yield SpinnerWidget(
                self.settings.spinner_interval, id=VIEW_IDS[UIState.SENDING]
            )
            with Vertical(id=VIEW_IDS[UIState.DISPLAYING]):
                yield ResponsePanelWidget(
                    self.settings.body_preview_limit, id="response-panel"
                )
                yield Static("🔙 Ctrl+B: go back | Q: quit", classes="help")
        yield Footer()

    def on_mount(self) -> None:
        self._show_state()

    def check_action(self, action: str, parameters: tuple) -> Optional[bool]:
        state = self.session.state
        if action in ("send", "focus_field"):
            return state is UIState.COMPOSING
        if action == "back":
            return state is UIState.DISPLAYING
        return True

    def action_send(self) -> None:
        for kind in FieldKind:
            self.session.edit(kind, _field_value(self._field_widget(kind)))
        request = self.session.submit()
        if request is None:
            return
        self._show_state()
        self._dispatch(request)

    def action_focus_field(self, step: int) -> None:
        if step > 0:
            self.session.focus_next()
        else:
            self.session.focus_previous()
        self._update_focus()

    def action_back(self) -> None:
        if self.session.back():
            self._show_state()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._record_edit(event.input, event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._record_edit(event.text_area, event.text_area.text)

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        kind = FIELD_KINDS.get(event.widget.id or "")
        if kind is not None and kind is not self.session.focused:
            self.session.focus(kind)

    def on_request_completed(self, message: RequestCompleted) -> None:
        if self.session.complete(message.outcome):
            self.query_one(ResponsePanelWidget).set_content(self.session.outcome)
            self._show_state()

    @work(exclusive=True, name="dispatch")
    async def _dispatch(self, request: PendingRequest) -> None:
        outcome = await execute_request(request, timeout=self.settings.request_timeout)
        self.post_message(RequestCompleted(outcome))

    def _record_edit(self, widget: Widget, value: str) -> None:
        kind = FIELD_KINDS.get(widget.id or "")
        if kind is not None:
            self.session.edit(kind, value)

    def _field_widget(self, kind: FieldKind) -> EditField:
        return self.query_one(f"#{FIELD_IDS[kind]}")

    def _show_state(self) -> None:
        state = self.session.state
        logger.debug("Showing %s view", state.value)
        self.query_one(ContentSwitcher).current = VIEW_IDS[state]
        self.query_one(ComposeView).disabled = state is not UIState.COMPOSING

        spinner = self.query_one(SpinnerWidget)
        if state is UIState.SENDING:
            spinner.start()
        else:
            spinner.stop()

        if state is UIState.COMPOSING:
            self._update_focus()
        elif state is UIState.DISPLAYING:
            self.query_one(ResponsePanelWidget).focus()
        else:
            self.set_focus(None)
        self.refresh_bindings()

    def _update_focus(self) -> None:
        for kind in FieldKind:
            self._field_widget(kind).blur()
        self._field_widget(self.session.focused).focus()
