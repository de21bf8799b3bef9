"""Transport protocol — unary and streaming calls against the node."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..errors import StatusCode

OnMessage = Callable[[dict[str, Any]], None]
OnEnd = Callable[[StatusCode, str], None]


@dataclass(frozen=True)
class UnaryResult:
    """Outcome of a unary call; ``response`` is set only when status is OK."""

    status: StatusCode
    message: str = ""
    response: dict[str, Any] | None = None


class Transport(Protocol):
    """Abstract interface for calling node service methods."""

    async def unary(self, method: str, request: dict[str, Any]) -> UnaryResult: ...

    async def invoke(
        self,
        method: str,
        request: dict[str, Any],
        on_message: OnMessage,
        on_end: OnEnd,
    ) -> None:
        """Run a server stream, calling ``on_end`` exactly once at the end."""
        ...
