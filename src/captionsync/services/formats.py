"""
Subtitle serialization.

Renders a cue sequence as SRT, WebVTT, plain text, or a list of records.
Time codes are floored to whole milliseconds: HH:MM:SS,mmm for SRT and
HH:MM:SS.mmm for WebVTT. Unknown format names degrade to records (json)
so the pipeline never fails on a format choice.

Also parses SRT/WebVTT text back into cues.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Iterable, List

from captionsync.domain.cue import Cue
from captionsync.domain.result import SerializedOutput
from captionsync.exceptions import InvalidInputError
from captionsync.utils.logging import get_logger

log = get_logger(__name__)


class CaptionFormat(str, Enum):
    SRT = "srt"
    VTT = "vtt"
    JSON = "json"
    TXT = "txt"


SUPPORTED_FORMATS = tuple(f.value for f in CaptionFormat)

FILE_SUFFIXES = {
    CaptionFormat.SRT: ".srt",
    CaptionFormat.VTT: ".vtt",
    CaptionFormat.JSON: ".json",
    CaptionFormat.TXT: ".txt",
}

_TIMECODE_RE = re.compile(r"(?:(\d+):)?(\d{1,2}):(\d{2})[,.](\d{3})")


def resolve_format(name: str | CaptionFormat | None) -> CaptionFormat:
    if isinstance(name, CaptionFormat):
        return name
    try:
        return CaptionFormat(str(name).strip().lower())
    except ValueError:
        log.debug("Unknown caption format %r; using json.", name)
        return CaptionFormat.JSON


def format_timestamp(seconds: float, *, separator: str = ",") -> str:
    # Round away float noise (e.g. 1.001 * 1000 = 1000.999...) before flooring.
    total_ms = int(math.floor(round(max(seconds, 0.0) * 1000, 6)))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    # Two-digit hour field; values past 99h wrap.
    return f"{hours % 100:02d}:{minutes:02d}:{secs:02d}{separator}{millis:03d}"


def format_srt_time(seconds: float) -> str:
    return format_timestamp(seconds, separator=",")


def format_vtt_time(seconds: float) -> str:
    return format_timestamp(seconds, separator=".")


def to_srt(cues: Iterable[Cue]) -> str:
    blocks = [
        f"{cue.index}\n{format_srt_time(cue.start_time)} --> {format_srt_time(cue.end_time)}\n{cue.text}\n"
        for cue in cues
    ]
    return "\n".join(blocks)


def to_vtt(cues: Iterable[Cue]) -> str:
    blocks = [
        f"{format_vtt_time(cue.start_time)} --> {format_vtt_time(cue.end_time)}\n{cue.text}"
        for cue in cues
    ]
    return "WEBVTT\n\n" + "\n\n".join(blocks)


def to_text(cues: Iterable[Cue]) -> str:
    return " ".join(cue.text for cue in cues)


def to_records(cues: Iterable[Cue]) -> list[dict[str, Any]]:
    return [cue.to_dict() for cue in cues]


def serialize(cues: Iterable[Cue], fmt: str | CaptionFormat | None) -> SerializedOutput:
    resolved = resolve_format(fmt)
    if resolved is CaptionFormat.SRT:
        return to_srt(cues)
    if resolved is CaptionFormat.VTT:
        return to_vtt(cues)
    if resolved is CaptionFormat.TXT:
        return to_text(cues)
    return to_records(cues)


# ---------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------
def parse_timestamp(value: str) -> float:
    match = _TIMECODE_RE.fullmatch(value.strip())
    if not match:
        raise InvalidInputError(f"Invalid time code: {value!r}")
    hours, minutes, secs, millis = match.groups()
    return int(hours or 0) * 3600 + int(minutes) * 60 + int(secs) + int(millis) / 1000


def _parse_blocks(text: str) -> List[Cue]:
    cues: List[Cue] = []
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    for block in re.split(r"\n\s*\n", normalized):
        lines = [line.strip() for line in block.splitlines() if line.strip()]
        timing_at = next((i for i, line in enumerate(lines) if "-->" in line), None)
        if timing_at is None:
            continue
        start_raw, end_raw = [p.strip() for p in lines[timing_at].split("-->", 1)]
        # WebVTT cue settings may follow the end time.
        end_raw = end_raw.split()[0] if end_raw else end_raw
        # SRT numbers its cues; WebVTT identifiers are optional and free-form.
        label = lines[timing_at - 1] if timing_at else ""
        cues.append(
            Cue(
                index=int(label) if label.isdigit() else len(cues) + 1,
                text="\n".join(lines[timing_at + 1 :]),
                start_time=parse_timestamp(start_raw),
                end_time=parse_timestamp(end_raw),
            )
        )
    return cues


def parse_srt(text: str) -> List[Cue]:
    """Parse SRT text into cues, keeping the numeric cue labels."""
    return _parse_blocks(text)


def parse_vtt(text: str) -> List[Cue]:
    body = text.lstrip("\ufeff")
    if not body.startswith("WEBVTT"):
        raise InvalidInputError("WebVTT text must start with 'WEBVTT'.")
    return _parse_blocks(body)
