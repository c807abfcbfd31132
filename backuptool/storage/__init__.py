"""Storage sink protocol.

All sinks implement the ``StorageSink`` protocol: a ``sink_name`` property,
an ``init()`` check, a ``write(stream, destination)`` method and
``close()``, which releases any client connection the sink holds.

Write contract
--------------
- If something already exists at ``destination``, raise
  ``WriteConflictError`` and write nothing.  Sinks never overwrite.
- Create any missing intermediate path segments.
- If the write fails partway, remove the partial destination on a best
  effort basis and raise ``SinkWriteError``.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class StorageSink(Protocol):
    """Protocol that every storage sink must implement.

    Attributes
    ----------
    sink_name : str
        Identifier of the sink variant (``"local"`` or ``"azure"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the name of this sink."""
        ...

    def init(self) -> None:
        """Validate configuration and reachability before any write."""
        ...

    def write(self, stream: BinaryIO, destination: str) -> None:
        """Persist *stream* at *destination*, refusing to overwrite."""
        ...

    def close(self) -> None:
        """Release connections.  Safe to call more than once."""
        ...
