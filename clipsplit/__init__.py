"""ClipSplit — split large videos into size-bounded parts, skipping excluded ranges."""

__version__ = "0.1.0"
