from .facade import ExtensionBridge
from .chunking import ChunkAssembler, decode_chunk, encode_chunk
from .receiver import ChunkReceiver
from .correlator import Correlator

__all__ = ["ChunkAssembler", "ChunkReceiver", "Correlator", "ExtensionBridge", "decode_chunk", "encode_chunk"]
