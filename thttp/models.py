from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class PendingRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


@dataclass(frozen=True)
class Response:
    status_code: int
    status: str
    headers: Dict[str, List[str]]
    body: str
    elapsed_ms: float


@dataclass(frozen=True)
class Failure:
    error: str


Outcome = Union[Response, Failure]
