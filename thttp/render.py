from __future__ import annotations

import json
from typing import Dict, List

import yaml
from rich.text import Text

from thttp.config import DEFAULT_SETTINGS
from thttp.models import Failure, Outcome

TITLE_STYLE = "bold #ff5faf"
OK_STYLE = "bold green"
WARNING_STYLE = "bold yellow"
ERROR_STYLE = "bold red"
ELLIPSIS = "..."


def status_style(status_code: int) -> str:
    if status_code >= 400:
        return ERROR_STYLE
    if status_code >= 300:
        return WARNING_STYLE
    return OK_STYLE


def format_headers(headers: Dict[str, List[str]]) -> str:
    if not headers:
        return "(none)"
    return yaml.safe_dump(
        headers,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    ).rstrip("\n")


def format_body(body: str, limit: int = DEFAULT_SETTINGS.body_preview_limit) -> str:
    """Pretty-print a JSON body, otherwise return it as is; then truncate."""
    try:
        body_text = json.dumps(json.loads(body), indent=2, ensure_ascii=False)
    except (ValueError, RecursionError):
        body_text = body
    if len(body_text) > limit:
        body_text = body_text[:limit] + ELLIPSIS
    return body_text


def render_outcome(
    outcome: Outcome, limit: int = DEFAULT_SETTINGS.body_preview_limit
) -> Text:
    text = Text()
    text.append("📡 HTTP Response", style=TITLE_STYLE)
    text.append("\n\n")

    if isinstance(outcome, Failure):
        text.append("❌ Error: ", style=ERROR_STYLE)
        text.append(outcome.error)
        return text

    text.append("Status: ")
    text.append(outcome.status, style=status_style(outcome.status_code))
    text.append(f" ({outcome.elapsed_ms:.0f} ms)\n\n")

    text.append("Response Headers:\n", style="bold")
    text.append(_indent(format_headers(outcome.headers)))
    text.append("\n\n")

    text.append("Response Body:\n", style="bold")
    text.append(format_body(outcome.body, limit))
    return text


def _indent(block: str, prefix: str = "  ") -> str:
    return "\n".join(prefix + line for line in block.split("\n"))
