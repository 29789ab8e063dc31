from .client import PeerClient

__all__ = ["PeerClient"]
