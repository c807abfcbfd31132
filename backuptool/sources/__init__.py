"""Artifact source protocol.

A source produces a finite, deterministically ordered listing of artifacts
and fetches each one on demand.  Listing failures are fatal; fetch failures
are reported as ``FetchError`` so the archive builder can skip them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from backuptool.models.artifacts import ArtifactRef


@runtime_checkable
class ArtifactSource(Protocol):
    """Protocol that every artifact source must implement.

    Attributes
    ----------
    source_name : str
        Identifier of the source variant (e.g. ``"grafana"``, ``"file"``).
    archive_name : str
        Stem of the archive filename produced from this source.
    """

    @property
    def source_name(self) -> str:
        """Return the name of this source."""
        ...

    @property
    def archive_name(self) -> str:
        """Return the archive filename stem for this source."""
        ...

    def init(self) -> None:
        """Check connectivity and configuration eagerly.

        Raises
        ------
        ConnectivityError
            If the upstream store cannot be reached.
        """
        ...

    def list_artifacts(self) -> list[ArtifactRef]:
        """Return every artifact to archive, in a stable order.

        Raises
        ------
        ListingError
            If the listing cannot be produced.  No partial listings.
        """
        ...

    def fetch(self, ref: ArtifactRef) -> bytes:
        """Return the content bytes of one artifact.

        Raises
        ------
        FetchError
            If this artifact cannot be retrieved.  Recoverable.
        """
        ...

    def close(self) -> None:
        """Release any connections held by the source."""
        ...
