from .endpoint import ChannelEndpoint

__all__ = ["ChannelEndpoint"]
