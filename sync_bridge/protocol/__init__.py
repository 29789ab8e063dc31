from .frames import CallFrame, ResultFrame, ControlFrame, HandshakeFrame, encode_frame
from .parser import load_frame, parse_handshake, parse_call_frame, parse_peer_frame

__all__ = [
    "CallFrame",
    "ControlFrame",
    "HandshakeFrame",
    "ResultFrame",
    "encode_frame",
    "load_frame",
    "parse_call_frame",
    "parse_handshake",
    "parse_peer_frame",
]
