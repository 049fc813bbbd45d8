#!/usr/bin/env python3
"""Generate a synthetic test video for ClipSplit pipeline testing.

Produces a 20-second video where the "commercial breaks" are easy to spot:
  0-6s    440 Hz tone + blue
  6-9s    1000 Hz tone + red     (commercial)
  9-15s   660 Hz tone + green
  15-17s  1000 Hz tone + red     (commercial)
  17-20s  880 Hz tone + yellow

A keyframe every 10 frames keeps stream-copy cuts close to the requested times.
"""

import subprocess
import sys
from pathlib import Path

COMMERCIALS = [(6.0, 9.0), (15.0, 17.0)]

_BLOCKS = [
    (440, "blue", 6),
    (1000, "red", 3),
    (660, "green", 6),
    (1000, "red", 2),
    (880, "yellow", 3),
]


def generate_test_video(output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)

    n = len(_BLOCKS)
    audio_parts = [f"sine=f={freq}:d={d}[a{i}]" for i, (freq, _, d) in enumerate(_BLOCKS)]
    video_parts = [
        f"color=c={color}:s=320x240:d={d}:r=30[v{i}]"
        for i, (_, color, d) in enumerate(_BLOCKS)
    ]
    audio_labels = "".join(f"[a{i}]" for i in range(n))
    video_labels = "".join(f"[v{i}]" for i in range(n))

    filter_complex = ";".join(
        audio_parts
        + [f"{audio_labels}concat=n={n}:v=0:a=1[aout]"]
        + video_parts
        + [f"{video_labels}concat=n={n}:v=1:a=0[vout]"]
    )

    cmd = [
        "ffmpeg", "-y",
        "-filter_complex", filter_complex,
        "-map", "[vout]",
        "-map", "[aout]",
        "-c:v", "libx264",
        "-g", "10",
        "-c:a", "aac",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, capture_output=True, check=True)
    return output


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.mp4")
    print(f"Generated: {generate_test_video(out)}")
