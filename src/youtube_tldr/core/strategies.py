"""
Transcript acquisition strategies.

Each strategy implements the same small interface: a ``name`` and an async
``attempt(video_id, languages)`` that returns a ``TranscriptResult`` with text
or raises. The fetcher runs them in order until one succeeds.
"""

import asyncio
import json
import random
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from ..exceptions import EmptyTranscript
from ..models import TranscriptResult
from ..utils.logging import get_logger
from .caption_parser import CaptionParser, build_result, segment_from_mapping
from .config import config

logger = get_logger("strategies")

YOUTUBE = "https://www.youtube.com"
CAPTIONS_API = "https://www.googleapis.com/youtube/v3/captions"

UA_POOL = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_3_1) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.4 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124 Safari/537.36",
]

PLAYER_RESPONSE_MARKERS = (
    "var ytInitialPlayerResponse = ",
    'window["ytInitialPlayerResponse"] = ',
    "ytInitialPlayerResponse = ",
)


def new_session() -> requests.Session:
    """HTTP session with transport retries and browser-like headers."""
    s = requests.Session()
    retries = Retry(total=2, connect=2, read=1, backoff_factor=0.5,
                    status_forcelist=[429, 500, 502, 503, 504],
                    allowed_methods=["HEAD", "GET"],
                    raise_on_status=False)
    s.mount("https://", HTTPAdapter(max_retries=retries))
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.headers.update({
        "User-Agent": random.choice(UA_POOL),
        "Accept": "*/*",
        "Accept-Language": "en-US,en;q=0.8",
    })
    s.cookies.set("CONSENT", "YES+1", domain=".youtube.com")
    return s


async def http_get(session: requests.Session, url: str, timeout: float, **kwargs) -> requests.Response:
    """Blocking GET in a worker thread, bounded by both timeouts."""
    return await asyncio.wait_for(
        asyncio.to_thread(session.get, url, timeout=timeout, **kwargs),
        timeout=timeout + 1
    )


def primary_subtag(code: Optional[str]) -> str:
    return (code or "").split("-")[0].lower()


def select_track(
    tracks: Sequence[Dict[str, Any]],
    languages: Sequence[str],
    code_of: Callable[[Dict[str, Any]], Optional[str]]
) -> Optional[Dict[str, Any]]:
    """
    Pick a caption track for the ordered language preferences.

    First any exact code match, then any language family match (primary
    subtag, case-insensitive), otherwise the first track.
    """
    if not tracks:
        return None

    for lang in languages:
        for track in tracks:
            if code_of(track) == lang:
                return track

    for lang in languages:
        family = primary_subtag(lang)
        for track in tracks:
            if family and primary_subtag(code_of(track)) == family:
                return track

    return tracks[0]


class TranscriptStrategy:
    """Interface for one way of obtaining a transcript."""

    name = "strategy"

    async def attempt(self, video_id: str, languages: Sequence[str]) -> TranscriptResult:
        raise NotImplementedError


class CaptionsApiStrategy(TranscriptStrategy):
    """Official Data API captions: list tracks, pick one, download and parse."""

    name = "captions_api"

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        parser: Optional[CaptionParser] = None,
        list_timeout: Optional[float] = None,
        download_timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else config.api.youtube_api_key
        self.session = session or new_session()
        self.parser = parser or CaptionParser()
        self.list_timeout = list_timeout or config.transcript.list_timeout
        self.download_timeout = download_timeout or config.transcript.download_timeout

    async def attempt(self, video_id: str, languages: Sequence[str]) -> TranscriptResult:
        if not self.api_key:
            raise RuntimeError("YouTube Data API key not configured")

        r = await http_get(
            self.session, CAPTIONS_API, self.list_timeout,
            params={"part": "snippet", "videoId": video_id, "key": self.api_key}
        )
        r.raise_for_status()
        items = r.json().get("items") or []
        if not items:
            raise EmptyTranscript("No caption tracks listed")

        track = select_track(items, languages, lambda t: (t.get("snippet") or {}).get("language"))
        logger.debug(f"Captions API selected track {track.get('id')} for {video_id}")

        r = await http_get(
            self.session, f"{CAPTIONS_API}/{track['id']}", self.download_timeout,
            params={"key": self.api_key}
        )
        r.raise_for_status()
        return self.parser.parse(r.text)


class UnofficialServiceStrategy(TranscriptStrategy):
    """Third-party transcript services, tried in configured order."""

    name = "unofficial_service"

    def __init__(
        self,
        endpoints: Optional[List[str]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ):
        self.endpoints = list(endpoints) if endpoints is not None else list(config.transcript.unofficial_endpoints)
        self.session = session or new_session()
        self.timeout = timeout or config.transcript.download_timeout

    async def attempt(self, video_id: str, languages: Sequence[str]) -> TranscriptResult:
        for template in self.endpoints:
            url = template.format(video_id=video_id)
            try:
                r = await http_get(self.session, url, self.timeout)
            except Exception as e:
                logger.debug(f"Unofficial endpoint {url} failed: {e}")
                continue

            if not 200 <= r.status_code < 300:
                logger.debug(f"Unofficial endpoint {url} returned {r.status_code}")
                continue

            try:
                data = r.json()
            except ValueError:
                continue

            result = self.parse_payload(data)
            if result is not None:
                return result

        raise EmptyTranscript("No unofficial service returned a usable transcript")

    def parse_payload(self, data: Any) -> Optional[TranscriptResult]:
        """Map one service payload to a result, or None when it is unusable."""
        if isinstance(data, list):
            items = data
        elif isinstance(data, dict):
            items = data.get("transcript") or data.get("segments")
            if not isinstance(items, list):
                text = str(data.get("text") or "").strip()
                return TranscriptResult(text=text) if text else None
        else:
            return None

        segments = [segment_from_mapping(item) for item in items if isinstance(item, dict)]
        try:
            return build_result(segments)
        except EmptyTranscript:
            return None


class WatchPageStrategy(TranscriptStrategy):
    """Caption tracks from the player response embedded in the watch page."""

    name = "watch_page"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        parser: Optional[CaptionParser] = None,
        page_timeout: Optional[float] = None,
        download_timeout: Optional[float] = None
    ):
        self.session = session or new_session()
        self.parser = parser or CaptionParser()
        self.page_timeout = page_timeout or config.transcript.page_timeout
        self.download_timeout = download_timeout or config.transcript.download_timeout

    async def attempt(self, video_id: str, languages: Sequence[str]) -> TranscriptResult:
        r = await http_get(self.session, f"{YOUTUBE}/watch?v={video_id}", self.page_timeout)
        r.raise_for_status()

        player = extract_player_response(r.text)
        if player is None:
            raise RuntimeError("Player response not found in watch page")

        tracks = collect_caption_tracks(player)
        if not tracks:
            raise EmptyTranscript("No caption tracks in player response")

        track = select_track(tracks, languages, lambda t: t.get("languageCode"))
        logger.debug(f"Watch page selected track lang={track.get('languageCode')} for {video_id}")

        r = await http_get(self.session, track["baseUrl"], self.download_timeout)
        r.raise_for_status()
        return self.parser.parse(r.text, fmt="xml")


def extract_player_response(html: str) -> Optional[Dict[str, Any]]:
    """Decode the JSON object following the first known player-response marker."""
    decoder = json.JSONDecoder()
    for marker in PLAYER_RESPONSE_MARKERS:
        idx = html.find(marker)
        if idx < 0:
            continue
        start = idx + len(marker)
        try:
            obj, _ = decoder.raw_decode(html, start)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            return obj

    m = re.search(r"ytInitialPlayerResponse\s*=\s*(\{.+?\})\s*;\s*(?:var|</script>)", html, flags=re.S)
    if m:
        try:
            return json.loads(m.group(1))
        except json.JSONDecodeError:
            return None
    return None


def collect_caption_tracks(player: Dict[str, Any]) -> List[Dict[str, Any]]:
    cap = (player.get("captions") or {}).get("playerCaptionsTracklistRenderer") or {}
    return [t for t in cap.get("captionTracks") or [] if t.get("baseUrl")]


def default_strategies() -> List[TranscriptStrategy]:
    """The standard ordered strategy list sharing one HTTP session."""
    session = new_session()
    return [
        CaptionsApiStrategy(session=session),
        UnofficialServiceStrategy(session=session),
        WatchPageStrategy(session=session),
    ]
