"""
Track configuration: canonical defaults and resolution into an immutable TrackConfig.
"""
from lofi.params.canonical_defaults import TRACK_DEFAULTS
from lofi.params.resolve import merge_params, resolve_config

__all__ = ["TRACK_DEFAULTS", "merge_params", "resolve_config"]
