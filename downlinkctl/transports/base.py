"""Dispatch interfaces."""

from __future__ import annotations

from typing import Any, Protocol

from downlinkctl.core.model import DispatchResult


class Dispatcher(Protocol):
    async def send(
        self,
        url: str,
        headers: dict[str, str],
        body: dict[str, Any],
    ) -> DispatchResult:
        """POST a JSON body and classify the outcome."""
