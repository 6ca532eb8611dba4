"""Error taxonomy shared by the core and adapters."""

from __future__ import annotations


class PotaWatchError(Exception):
    """Base class for all recoverable potawatch errors."""


class ConfigurationMissing(PotaWatchError):
    """No persisted configuration was found; callers substitute defaults."""


class ChannelUnavailable(PotaWatchError):
    """An output sink cannot act right now (missing binary, no display)."""


class RemoteServiceFailure(PotaWatchError):
    """A remote backend was unreachable, returned an error, or timed out."""


class AssetMissing(PotaWatchError):
    """A configured file (sound, audio) does not exist on disk."""
