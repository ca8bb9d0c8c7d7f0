"""
Pipeline — the ROP pipeline from archive to decoded trust list.

Domain layer — no I/O of its own. All I/O is injected via ports
(Protocol interfaces).

The pipeline connects stages via flat_map, forming a railway:

  fetch()
    → extract_der(archive)
      → decode(der)

Each stage returns Result[T]. Failures short-circuit automatically and
are wrapped with the name of the stage that failed, so the final error
reads outer → inner, e.g.

  error decoding authroot.stl: error parsing CTL: malformed ...
"""

from __future__ import annotations

from railway.result import Result

from authroot_parser.domain.models import TrustList
from authroot_parser.domain.ports import ArchiveSource, DerExtractor, TrustListDecoder


def run_pipeline(
    source: ArchiveSource,
    extractor: DerExtractor,
    decoder: TrustListDecoder,
) -> Result[TrustList]:
    """
    Fetch the archive, extract authroot.stl and decode it.

    Returns Result[TrustList] on success, or Result.failure with the
    error from the first failing stage, wrapped in that stage's context.
    """
    return (
        source.fetch()
        .map_failure(lambda err: err.wrap("error fetching authroot archive"))
        .flat_map(
            lambda archive: extractor.extract_der(archive).map_failure(
                lambda err: err.wrap("error extracting authroot.stl")
            )
        )
        .flat_map(
            lambda der: decoder.decode(der).map_failure(
                lambda err: err.wrap("error decoding authroot.stl")
            )
        )
    )
