"""Aviation Weather (aviationweather.gov) API source for raw METAR/TAF text."""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import requests

from ari_wx import config

logger = logging.getLogger(__name__)

_ICAO_RE = re.compile(r'^[A-Z][A-Z0-9]{3}$')


class FetchErrorKind(Enum):
    """Why a report could not be obtained."""

    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NO_DATA = "no_data"
    NETWORK = "network"
    INVALID_STATION = "invalid_station"


@dataclass
class FetchResult:
    """
    Outcome of one fetch: either report text or a typed failure.

    Attributes:
        ok: True when text holds a report
        text: Raw report text (empty on failure)
        error_kind: Failure category when ok is False
        status: HTTP status code, if a response was received
        message: Short diagnostic for logs and user-facing errors
    """

    ok: bool
    text: str = ""
    error_kind: Optional[FetchErrorKind] = None
    status: Optional[int] = None
    message: str = ""

    @classmethod
    def success(cls, text: str, status: Optional[int] = 200) -> 'FetchResult':
        return cls(ok=True, text=text, status=status)

    @classmethod
    def failure(
        cls,
        error_kind: FetchErrorKind,
        message: str = "",
        status: Optional[int] = None,
    ) -> 'FetchResult':
        return cls(ok=False, error_kind=error_kind, status=status, message=message)


class AvWxSource:
    """
    Fetch the latest raw METAR and TAF for a station.

    Each request is bounded by a timeout and never raises: failures come
    back as FetchResult with an error kind.

    Example:
        source = AvWxSource()
        metar, taf = source.fetch_pair("RJTT")
        if metar.ok:
            print(metar.text)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds (config.FETCH_TIMEOUT by default).
            base_url: Provider base URL (config.WX_PROVIDER_BASE_URL by default).
        """
        self._session = session or requests.Session()
        self._timeout = config.FETCH_TIMEOUT if timeout is None else timeout
        self._base_url = (base_url or config.WX_PROVIDER_BASE_URL).rstrip("/")
        self._session.headers.setdefault("User-Agent", config.USER_AGENT)

    def fetch_metar(self, icao: str) -> FetchResult:
        """
        Fetch the most recent METAR for a station.

        Args:
            icao: ICAO airport code

        Returns:
            FetchResult whose text is a single METAR line
        """
        station = self._normalize(icao)
        if station is None:
            return FetchResult.failure(FetchErrorKind.INVALID_STATION, f"Invalid ICAO code: {icao!r}")

        result = self._fetch_raw("metar", {"ids": station, "format": "raw"})
        if not result.ok:
            return result

        for line in result.text.splitlines():
            line = line.strip()
            if line:
                return FetchResult.success(line, result.status)
        return FetchResult.failure(FetchErrorKind.NO_DATA, f"No METAR for {station}", result.status)

    def fetch_taf(self, icao: str) -> FetchResult:
        """
        Fetch the current TAF for a station.

        Returns:
            FetchResult whose text is one TAF (possibly multi-line)
        """
        station = self._normalize(icao)
        if station is None:
            return FetchResult.failure(FetchErrorKind.INVALID_STATION, f"Invalid ICAO code: {icao!r}")

        result = self._fetch_raw("taf", {"ids": station, "format": "raw"})
        if not result.ok:
            return result

        blocks = self._split_taf_blocks(result.text)
        if not blocks:
            return FetchResult.failure(FetchErrorKind.NO_DATA, f"No TAF for {station}", result.status)
        return FetchResult.success(blocks[0], result.status)

    def fetch_pair(self, icao: str) -> Tuple[FetchResult, FetchResult]:
        """
        Fetch METAR and TAF concurrently.

        Returns:
            (metar_result, taf_result)
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            metar_future = executor.submit(self.fetch_metar, icao)
            taf_future = executor.submit(self.fetch_taf, icao)
            return metar_future.result(), taf_future.result()

    def _fetch_raw(self, endpoint: str, params: dict) -> FetchResult:
        """
        Make HTTP GET request and return raw text.

        Handles 204 (no data) and an empty body as NO_DATA.
        """
        url = f"{self._base_url}/{endpoint}"
        response = None
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            if response.status_code == 204:
                return FetchResult.failure(FetchErrorKind.NO_DATA, "No content", 204)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.warning("AvWx fetch timed out for %s: %s", endpoint, e)
            return FetchResult.failure(FetchErrorKind.TIMEOUT, "Timeout")
        except requests.exceptions.HTTPError as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            if status is None:
                status = getattr(response, "status_code", None)
            logger.warning("AvWx fetch failed for %s: %s", endpoint, e)
            return FetchResult.failure(FetchErrorKind.HTTP_ERROR, str(e)[:200], status)
        except requests.exceptions.RequestException as e:
            logger.warning("AvWx fetch failed for %s: %s", endpoint, e)
            return FetchResult.failure(FetchErrorKind.NETWORK, str(e)[:200])

        text = response.text or ""
        if not text.strip():
            return FetchResult.failure(FetchErrorKind.NO_DATA, "Empty response", response.status_code)
        return FetchResult.success(text, response.status_code)

    @staticmethod
    def _normalize(icao: str) -> Optional[str]:
        station = (icao or "").strip().upper()
        if not _ICAO_RE.match(station):
            return None
        return station

    @staticmethod
    def _split_taf_blocks(raw_text: str) -> List[str]:
        """
        Split multi-TAF raw text into individual TAF blocks.

        The API returns TAFs separated by blank lines or TAF headers.
        Each TAF may span multiple lines (continuation lines).
        """
        if not raw_text or not raw_text.strip():
            return []

        blocks = []
        current = []

        for line in raw_text.splitlines():
            stripped = line.strip()
            if not stripped:
                if current:
                    blocks.append("\n".join(current))
                    current = []
                continue

            if stripped.startswith("TAF") and current:
                blocks.append("\n".join(current))
                current = [stripped]
            else:
                current.append(stripped)

        if current:
            blocks.append("\n".join(current))

        return blocks
