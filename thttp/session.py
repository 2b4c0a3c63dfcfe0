"""
State machine behind the terminal UI.

The controller owns the UI state, the focus index over the four editable
fields, their current text and the last outcome. It knows nothing about
widgets: the app forwards key gestures and completion messages here and
redraws from the result.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, Optional

from thttp.config import DEFAULT_SETTINGS, Settings
from thttp.http_client import parse_headers
from thttp.models import Outcome, PendingRequest

logger = logging.getLogger(__name__)


class UIState(enum.Enum):
    COMPOSING = "composing"
    SENDING = "sending"
    DISPLAYING = "displaying"


class FieldKind(enum.IntEnum):
    URL = 0
    METHOD = 1
    HEADERS = 2
    BODY = 3


FIELD_COUNT = len(FieldKind)


class SessionController:
    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        self.settings = settings
        self.state = UIState.COMPOSING
        self.focused = FieldKind.URL
        self.fields: Dict[FieldKind, str] = {
            FieldKind.URL: settings.default_url,
            FieldKind.METHOD: settings.default_method,
            FieldKind.HEADERS: "",
            FieldKind.BODY: "",
        }
        self.outcome: Optional[Outcome] = None

    @property
    def active_field(self) -> Optional[FieldKind]:
        """The field accepting keystrokes, or None outside Composing."""
        if self.state is not UIState.COMPOSING:
            return None
        return self.focused

    def focus_next(self) -> FieldKind:
        return self._move_focus(1)

    def focus_previous(self) -> FieldKind:
        return self._move_focus(-1)

    def focus(self, kind: FieldKind) -> bool:
        if self.state is not UIState.COMPOSING:
            logger.debug("Ignoring focus on %s while %s", kind.name, self.state.value)
            return False
        self.focused = kind
        return True

    def edit(self, kind: FieldKind, value: str) -> bool:
        if self.state is not UIState.COMPOSING:
            logger.debug("Ignoring edit of %s while %s", kind.name, self.state.value)
            return False
        self.fields[kind] = value
        return True

    def submit(self) -> Optional[PendingRequest]:
        """Build the request to dispatch and enter Sending.

        Returns None, leaving the state untouched, when not Composing or
        when the URL field is empty.
        """
        if self.state is not UIState.COMPOSING:
            logger.debug("Ignoring send while %s", self.state.value)
            return None
        url = self.fields[FieldKind.URL]
        if not url:
            return None
        method = self.fields[FieldKind.METHOD] or "GET"
        body = self.fields[FieldKind.BODY]
        request = PendingRequest(
            method=method,
            url=url,
            headers=parse_headers(self.fields[FieldKind.HEADERS]),
            body=body if body else None,
        )
        self.state = UIState.SENDING
        return request

    def complete(self, outcome: Outcome) -> bool:
        if self.state is not UIState.SENDING:
            logger.debug("Dropping outcome received while %s", self.state.value)
            return False
        self.outcome = outcome
        self.state = UIState.DISPLAYING
        return True

    def back(self) -> bool:
        if self.state is not UIState.DISPLAYING:
            return False
        self.state = UIState.COMPOSING
        return True

    def _move_focus(self, step: int) -> FieldKind:
        if self.state is UIState.COMPOSING:
            self.focused = FieldKind((self.focused + step) % FIELD_COUNT)
        return self.focused
