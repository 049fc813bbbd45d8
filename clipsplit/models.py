"""Shared data types used across ClipSplit."""

from dataclasses import dataclass


@dataclass
class TimeRange:
    """A start/end time pair in seconds."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class PartitionPoint:
    """One planned output file, bounded in effective (gap-removed) time."""

    index: int
    start: float
    end: float
    estimated_size_bytes: int

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    duration: float
    width: int
    height: int
    fps: float
    codec_video: str
    codec_audio: str | None
    bitrate: int
    format_name: str
