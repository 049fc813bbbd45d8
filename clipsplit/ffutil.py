"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
import re
import shutil
import subprocess
from pathlib import Path

from clipsplit.errors import ExecutionError, ProbeError, SplitError
from clipsplit.models import ProbeResult

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")


class FFmpegNotFoundError(SplitError):
    code = "split.ffmpeg_missing"


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in ("ffmpeg", "ffprobe"):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def format_ffmpeg_time(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS.mmm``, rounded to the nearest millisecond."""
    total_ms = max(int(round(seconds * 1000)), 0)
    h, rem = divmod(total_ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def probe(input_path: Path) -> ProbeResult:
    """Extract media metadata via ffprobe."""
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    data = json.loads(result.stdout)

    video_stream = next(
        (s for s in data["streams"] if s["codec_type"] == "video"), None
    )
    audio_stream = next(
        (s for s in data["streams"] if s["codec_type"] == "audio"), None
    )

    if video_stream is None:
        raise ValueError(f"No video stream found in {input_path}")

    # Parse fps from r_frame_rate (e.g. "30000/1001")
    num, den = video_stream.get("r_frame_rate", "0/0").split("/")
    fps = int(num) / int(den) if int(den) else 0.0

    fmt = data["format"]
    return ProbeResult(
        duration=float(fmt["duration"]),
        width=int(video_stream["width"]),
        height=int(video_stream["height"]),
        fps=fps,
        codec_video=video_stream["codec_name"],
        codec_audio=audio_stream["codec_name"] if audio_stream else None,
        bitrate=int(fmt.get("bit_rate", 0)),
        format_name=fmt.get("format_name", ""),
    )


def parse_duration(stderr: str) -> float | None:
    """Parse the ``Duration: HH:MM:SS.ss`` banner line from ``ffmpeg -i`` output.

    Returns None when the line is missing or reads ``N/A`` (live streams,
    truncated files).
    """
    match = _DURATION_RE.search(stderr)
    if match is None:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def get_duration(input_path: Path) -> float:
    """Return the media duration in seconds as reported by ``ffmpeg -i``."""
    cmd = ["ffmpeg", "-hide_banner", "-i", str(input_path)]
    # ffmpeg exits nonzero without an output file; only the banner matters here
    result = subprocess.run(cmd, capture_output=True, text=True)

    duration = parse_duration(result.stderr)
    if duration is None:
        raise ProbeError(
            f"Could not determine duration of {input_path}: duration unknown",
            details={"path": str(input_path)},
        )
    return duration


def _run_ffmpeg(cmd: list[str], output_path: Path, action: str) -> None:
    """Run ffmpeg and raise ExecutionError unless it produced ``output_path``."""
    logger.debug("Running %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True)
    stderr = result.stderr or ""

    if result.returncode == 0:
        return

    if result.returncode < 0:
        # Killed by a signal; accept the run only if the output made it to disk
        if output_path.exists():
            logger.warning(
                "ffmpeg %s was terminated (signal %d) but wrote %s",
                action, -result.returncode, output_path,
            )
            return
        raise ExecutionError(
            f"FFmpeg {action} terminated unexpectedly: {stderr}",
            returncode=result.returncode,
            stderr=stderr,
        )

    raise ExecutionError(
        f"FFmpeg {action} exited with code {result.returncode}: {stderr}",
        returncode=result.returncode,
        stderr=stderr,
    )


def extract_segment(
    input_path: Path, output_path: Path, start: float, end: float
) -> Path:
    """Stream-copy ``[start, end)`` of the input into ``output_path``."""
    cmd = [
        "ffmpeg", "-y",
        "-i", str(input_path),
        "-ss", format_ffmpeg_time(start),
        "-to", format_ffmpeg_time(end),
        "-c", "copy",
        "-avoid_negative_ts", "make_zero",
        str(output_path),
    ]
    _run_ffmpeg(cmd, output_path, "extract")
    return output_path


def _concat_list_entry(path: Path) -> str:
    escaped = path.resolve().as_posix().replace("'", "'\\''")
    return f"file '{escaped}'"


def concat_files(
    segment_paths: list[Path], output_path: Path, work_dir: Path
) -> Path:
    """Join files in order with the concat demuxer, without re-encoding.

    The demuxer list is written to ``work_dir`` next to the output and is
    removed afterwards.
    """
    if not segment_paths:
        raise ValueError("concat_files called with empty path list")

    list_path = work_dir / f"_temp_{output_path.stem}_concat.txt"
    list_path.write_text(
        "\n".join(_concat_list_entry(p) for p in segment_paths) + "\n",
        encoding="utf-8",
    )

    cmd = [
        "ffmpeg", "-y",
        "-f", "concat",
        "-safe", "0",
        "-i", str(list_path),
        "-c", "copy",
        str(output_path),
    ]
    try:
        _run_ffmpeg(cmd, output_path, "concat")
    finally:
        try:
            list_path.unlink()
        except OSError as e:
            logger.warning("Could not remove concat list %s: %s", list_path, e)

    return output_path
