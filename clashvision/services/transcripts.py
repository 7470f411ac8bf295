"""
YouTube caption transcripts.

Transcripts are a relevance signal, not a required input: any failure
for a video simply means "no transcript" for that video. Requests go
out in small batches with a pause between batches to stay under the
caption endpoint's rate limit.
"""

import asyncio
import html
import logging
import re

import httpx

from clashvision.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

LANGUAGE_CODES = ("en", "en-US", "en-GB")

# Parsed text must be longer than this to count as a transcript
MIN_TRANSCRIPT_LENGTH = 50

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")


def parse_transcript_markup(markup: str) -> str:
    """
    Reduce caption markup (srv3/TTML) to plain text.

    Tags are replaced by spaces, entities decoded, whitespace collapsed.
    """
    text = TAG_PATTERN.sub(" ", markup)
    text = html.unescape(text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


class TranscriptFetcher:
    """Best-effort transcript retrieval from the public timedtext endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        batch_size: int | None = None,
        batch_delay: float | None = None,
        language_codes: tuple[str, ...] = LANGUAGE_CODES,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            base_url: Timedtext URL. Defaults to settings.youtube_transcript_url.
            timeout: Per-request timeout in seconds.
            batch_size: Videos fetched concurrently per batch.
            batch_delay: Pause between batches in seconds.
            language_codes: Caption languages tried in order.
            client: Optional shared HTTP client.
        """
        self.base_url = base_url or settings.youtube_transcript_url
        self.timeout = timeout or settings.request_timeout
        self.batch_size = batch_size or settings.transcript_batch_size
        self.batch_delay = settings.transcript_batch_delay if batch_delay is None else batch_delay
        self.language_codes = language_codes
        self._client = client

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        headers = {"User-Agent": USER_AGENT}
        if self._client is not None:
            return await self._client.get(
                self.base_url, params=params, headers=headers, timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params, headers=headers)

    async def fetch(self, video_id: str) -> str | None:
        """
        Fetch the transcript for one video.

        Tries each language code in turn and returns the first result
        with substantial text.

        Returns:
            Plain-text transcript, or None if none could be retrieved
        """
        for lang in self.language_codes:
            params = {"lang": lang, "v": video_id, "fmt": "srv3"}
            try:
                response = await self._get(params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.debug("No %s transcript for %s: %s", lang, video_id, e)
                continue

            text = parse_transcript_markup(response.text)
            if len(text) > MIN_TRANSCRIPT_LENGTH:
                return text

        return None

    async def fetch_many(self, video_ids: list[str]) -> dict[str, str]:
        """
        Fetch transcripts for many videos in rate-limited batches.

        Videos within a batch are fetched concurrently; batches run one
        after another with a short pause in between.

        Returns:
            video id -> transcript, only for videos that have one
        """
        transcripts: dict[str, str] = {}

        for start in range(0, len(video_ids), self.batch_size):
            batch = video_ids[start : start + self.batch_size]
            results = await asyncio.gather(
                *(self.fetch(video_id) for video_id in batch),
                return_exceptions=True,
            )

            for video_id, result in zip(batch, results, strict=True):
                if isinstance(result, BaseException):
                    logger.warning("Transcript fetch crashed for %s: %s", video_id, result)
                elif result:
                    transcripts[video_id] = result

            if start + self.batch_size < len(video_ids):
                await asyncio.sleep(self.batch_delay)

        logger.info("Fetched %d transcripts for %d videos", len(transcripts), len(video_ids))
        return transcripts
