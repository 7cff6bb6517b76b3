"""
ClickerApiClient - HTTP client for the clicker store.

One instance per session, built by the caller and handed to the components.
Implements the three store contracts the client needs:

- increment_score: atomic add of a batch of clicks
- fetch_top_players: ranking ordered by clicks (descending)
- send_beacon: fire-and-forget increment for the page-exit path
"""

import logging
import threading
from typing import Optional

import httpx

from clicker.models.leaderboard import RankingEntry
from clicker.models.player import PlayerResponse

logger = logging.getLogger(__name__)

INCREMENT_PATH = "/rpc/increment_clicks"


class RemoteStoreError(Exception):
    """Raised when the store cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidNicknameError(RemoteStoreError):
    pass


class NicknameTakenError(RemoteStoreError):
    pass


class ClickerApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        beacon_timeout: float = 2.0
    ):
        self.base_url = base_url.rstrip("/")
        self.beacon_timeout = beacon_timeout
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def __aenter__(self) -> "ClickerApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def login(self, nickname: str) -> PlayerResponse:
        """Find-or-create a player by nickname."""
        try:
            data = await self._request("POST", "/players/login", json={"nickname": nickname})
        except RemoteStoreError as e:
            if e.status_code in (400, 422):
                raise InvalidNicknameError(str(e), e.status_code)
            if e.status_code == 409:
                raise NicknameTakenError(str(e), e.status_code)
            raise

        return PlayerResponse(**data)

    async def increment_score(self, player_id: str, amount: int) -> int:
        """Add `amount` clicks to the player. Returns the new stored total."""
        data = await self._request(
            "POST",
            INCREMENT_PATH,
            json={"player_id": player_id, "click_count": amount}
        )
        return data["clicks"]

    async def fetch_top_players(self, limit: int = 10) -> list[RankingEntry]:
        """Ranking rows in the order the store returns them."""
        data = await self._request("GET", "/leaderboard", params={"limit": limit})
        return [RankingEntry(**row) for row in data]

    def send_beacon(self, player_id: str, amount: int) -> None:
        """
        Best-effort increment that does not wait for anything.

        Runs on a daemon thread so it works from teardown code, even when the
        event loop is already shutting down. Nobody reads the outcome: no
        retry, no acknowledgement. The process may exit before it finishes.
        """
        thread = threading.Thread(
            target=self._post_beacon,
            args=(player_id, amount),
            name="clicker-beacon",
            daemon=True
        )
        thread.start()

    def _post_beacon(self, player_id: str, amount: int) -> None:
        try:
            httpx.post(
                f"{self.base_url}{INCREMENT_PATH}",
                json={"player_id": player_id, "click_count": amount},
                timeout=self.beacon_timeout
            )
        except httpx.HTTPError as e:
            logger.debug(f"Beacon for {player_id} (+{amount}) not delivered: {e}")

    async def _request(self, method: str, path: str, **kwargs):
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            raise RemoteStoreError(_error_detail(response), response.status_code)

        return response.json()


def _error_detail(response: httpx.Response) -> str:
    """FastAPI puts the message in `detail`; fall back to the raw body."""
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None

    if isinstance(detail, str):
        return detail
    return f"HTTP {response.status_code}: {response.text}"
