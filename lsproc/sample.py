"""
lsproc.sample
AUTHOR: carter-vin

Light result wrapper -> a failed read is reported, the polling loop keeps going
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from procfs.errors import ProcError


@dataclass(frozen=True)
class SampleOutcome:
    """
    Normalized sample result
    - ok: false=failure, error details in error fields
    - value: decoded snapshot if ok=true
    - error_kind: ProcError.kind tag when the failure came from procfs
    """

    name: str
    ok: bool
    value: Optional[Any] = None
    error_type: Optional[str] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None


def take_sample(name: str, fn: Callable[..., Any], *args, **kwargs) -> SampleOutcome:
    """
    Run a reader & collect a procfs failure as data

    Only ProcError is captured; anything else is a bug and propagates.
    """
    try:
        v = fn(*args, **kwargs)
        return SampleOutcome(name=name, ok=True, value=v)
    except ProcError as e:
        return SampleOutcome(
            name=name,
            ok=False,
            value=None,
            error_type=type(e).__name__,
            error_kind=e.kind,
            error_message=str(e),
        )
