"""Protocol interfaces for the node query client."""
from .node import NodeClient
from .transport import OnEnd, OnMessage, Transport, UnaryResult

__all__ = ["NodeClient", "OnEnd", "OnMessage", "Transport", "UnaryResult"]
