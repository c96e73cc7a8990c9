"""Port interfaces for the Buster application layer.

These protocol interfaces define contracts for adapters.
Orchestration depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ManifestWriterPort",
]

from buster.app.ports.manifest import ManifestWriterPort
