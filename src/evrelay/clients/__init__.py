"""Network clients: chain JSON-RPC access and webhook delivery."""

from evrelay.clients.rpc import RPC
from evrelay.clients.webhook import WebhookDispatcher

__all__ = [
    "RPC",
    "WebhookDispatcher",
]
