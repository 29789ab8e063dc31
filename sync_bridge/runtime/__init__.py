"""Runtime package.

Keep this module dependency-light: importing `sync_bridge.runtime.*` in unit
tests should not start any server.
"""

__all__: list[str] = []
