"""
Caption payload normalization.

Turns the raw bodies returned by the caption sources (timedtext XML, JSON
segment lists or plain text) into a uniform ``TranscriptResult``.
"""

import json
import re
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import EmptyTranscript
from ..models import TranscriptResult, TranscriptSegment
from ..utils.logging import get_logger

logger = get_logger("caption_parser")

TEXT_ELEMENT_RE = re.compile(r"<text\b([^>]*)>([^<]*)</text>", re.S)
START_ATTR_RE = re.compile(r'\bstart="([^"]*)"')
DUR_ATTR_RE = re.compile(r'\bdur="([^"]*)"')
ENTITY_RE = re.compile(r"&(amp|lt|gt|quot|apos|#[0-9]+|#[xX][0-9A-Fa-f]+);")

XML_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}

FORMATS = ("xml", "json", "text")


def _replace_entity(match: "re.Match[str]") -> str:
    name = match.group(1)
    if name in XML_ENTITIES:
        return XML_ENTITIES[name]
    try:
        if name[1] in "xX":
            return chr(int(name[2:], 16))
        return chr(int(name[1:]))
    except (ValueError, OverflowError):
        return match.group(0)


def decode_xml_entities(text: str) -> str:
    """Decode the five XML entities and numeric character references in one pass."""
    return ENTITY_RE.sub(_replace_entity, text)


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _join(segments: Iterable[TranscriptSegment]) -> str:
    return " ".join(seg.text for seg in segments if seg.text).strip()


def build_result(segments: List[TranscriptSegment]) -> TranscriptResult:
    """Build a result whose text is the space-joined segment texts."""
    text = _join(segments)
    if not text:
        raise EmptyTranscript("Caption segments contain no text")
    return TranscriptResult(text=text, segments=tuple(segments))


def segment_from_mapping(item: Dict[str, Any]) -> TranscriptSegment:
    """
    Build a segment from a loosely shaped JSON object.

    Accepts ``start``/``offset`` for the start, ``end`` or ``start + duration``
    for the end and ``text``/``content`` for the text. Missing numbers are 0.
    """
    start = _to_float(item.get("start", item.get("offset", 0)))
    if item.get("end") is not None:
        end = _to_float(item.get("end"))
    elif item.get("duration") is not None:
        end = start + _to_float(item.get("duration"))
    else:
        end = 0.0
    text = item.get("text")
    if text is None:
        text = item.get("content", "")
    return TranscriptSegment(start=start, end=end, text=str(text).strip())


class CaptionParser:
    """Parser for caption payloads in XML, JSON or plain text form."""

    def parse(self, content: str, fmt: Optional[str] = None) -> TranscriptResult:
        """
        Parse raw caption content.

        Args:
            content: Raw response body
            fmt: Presumed format (``xml``, ``json``, ``text``) or None to detect

        Returns:
            TranscriptResult with the joined text and ordered segments

        Raises:
            EmptyTranscript: If nothing usable could be parsed
        """
        if content is None:
            raise EmptyTranscript("Caption content is missing")
        if fmt is not None and fmt not in FORMATS:
            raise ValueError(f"Unknown caption format: {fmt}")

        stripped = content.strip()
        if fmt == "xml" or (fmt is None and stripped.startswith("<")):
            return self.parse_xml(content)
        if fmt in (None, "json"):
            result = self._try_parse_json(stripped)
            if result is not None:
                return result
        return self.parse_text(content)

    def parse_xml(self, xml: str) -> TranscriptResult:
        """Parse timedtext XML made of ``<text start=".." dur="..">`` elements."""
        segments: List[TranscriptSegment] = []
        for attrs, body in TEXT_ELEMENT_RE.findall(xml):
            start_match = START_ATTR_RE.search(attrs)
            dur_match = DUR_ATTR_RE.search(attrs)
            if not start_match or not dur_match:
                continue
            start = _to_float(start_match.group(1))
            duration = _to_float(dur_match.group(1))
            segments.append(TranscriptSegment(
                start=start,
                end=start + duration,
                text=decode_xml_entities(body).strip()
            ))

        if not segments:
            raise EmptyTranscript("No <text> elements found in caption XML")

        logger.debug(f"Parsed {len(segments)} XML caption segments")
        return build_result(segments)

    def parse_json(self, data: Any) -> TranscriptResult:
        """
        Parse decoded JSON captions.

        Accepts a list of ``{start?, end?, text}`` objects or an object with a
        top-level ``text`` and optional ``segments``.
        """
        if isinstance(data, list):
            segments = [segment_from_mapping(item) for item in data if isinstance(item, dict)]
            return build_result(segments)

        if isinstance(data, dict) and "text" in data:
            raw_segments = data.get("segments") or []
            segments = [segment_from_mapping(item) for item in raw_segments if isinstance(item, dict)]
            text = str(data.get("text") or "").strip()
            if not text:
                return build_result(segments)
            return TranscriptResult(text=text, segments=tuple(segments))

        raise ValueError("Unsupported JSON caption shape")

    def parse_text(self, content: str) -> TranscriptResult:
        """Treat content as plain transcript text without timing."""
        text = (content or "").strip()
        if not text:
            raise EmptyTranscript("Caption content is empty")
        return TranscriptResult(text=text, segments=())

    def _try_parse_json(self, content: str) -> Optional[TranscriptResult]:
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, ValueError):
            return None
        try:
            return self.parse_json(data)
        except ValueError:
            # Valid JSON of another shape, fall through to plain text
            return None
