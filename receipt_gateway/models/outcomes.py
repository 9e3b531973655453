from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    text: str
    raw: Any


@dataclass(frozen=True)
class UpstreamError:
    status_code: int
    body: Any  # verbatim upstream body


@dataclass(frozen=True)
class TransportFailure:
    cause: BaseException


RelayOutcome = Union[Success, UpstreamError, TransportFailure]
