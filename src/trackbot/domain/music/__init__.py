# 🎵 trackbot/domain/music/__init__.py
"""🎵 Домен отримання та доставки треків."""

from .entities import (
    PLACEHOLDER_ARTIST,
    AssetKind,
    CachedMediaHandle,
    ProviderTag,
    TrackEntry,
    TrackMetadata,
    TrackReference,
)
from .interfaces import (
    IMediaCache,
    IMediaProcessor,
    IMediaTransport,
    IProgressSink,
    ISourceProvider,
    ResolvedStream,
)

__all__ = [
    "PLACEHOLDER_ARTIST",
    "AssetKind",
    "CachedMediaHandle",
    "ProviderTag",
    "TrackEntry",
    "TrackMetadata",
    "TrackReference",
    "IMediaCache",
    "IMediaProcessor",
    "IMediaTransport",
    "IProgressSink",
    "ISourceProvider",
    "ResolvedStream",
]
