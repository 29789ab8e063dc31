from .runtime import RuntimeDeps
from .chunks import ChunkSession, CompletedUpload
from .pending import PendingCall
from .settings import AppSettings
from .connection import Connection

__all__ = ["AppSettings", "ChunkSession", "CompletedUpload", "Connection", "PendingCall", "RuntimeDeps"]
