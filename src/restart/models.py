"""Value types passed between the restart service and the CLI runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .client import Endpoint


@dataclass(frozen=True)
class Repository:
    """A Travis-tracked repo as listed by one endpoint."""

    slug: str
    endpoint: Endpoint
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass
class RunSummary:
    """Per-run bookkeeping for the closing report."""

    restarted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


__all__ = ["Repository", "RunSummary"]
