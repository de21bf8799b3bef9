from .client import CasperClient
from .transport import GatewayTransport

__all__ = ["CasperClient", "GatewayTransport"]
