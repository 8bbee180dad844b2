"""Diagnostics scope contracts: model connectivity probe."""

from __future__ import annotations

from pydantic import BaseModel


class DiagnosticResult(BaseModel):
    ok: bool
    message: str
    provider: str = ""
    model: str = ""
    latency_ms: float = 0.0
