"""ExerciseDB API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx


def _segment(value: str) -> str:
    return quote(value, safe="")


class ExerciseDbClient(Protocol):
    """Interface for ExerciseDB API interactions.

    Every call returns the raw ``{"success": ..., "data": ...}`` envelope.
    """

    async def list_exercises(self, limit: int, offset: int) -> dict[str, object]:
        """List exercises page by page."""

    async def search_exercises(self, query: str, limit: int) -> dict[str, object]:
        """Fuzzy-search exercises by text."""

    async def filter_exercises(
        self, filters: dict[str, str], limit: int
    ) -> dict[str, object]:
        """Filter exercises by equipment, body part and target muscle."""

    async def get_exercise(self, exercise_id: str) -> dict[str, object]:
        """Fetch a single exercise."""

    async def list_by_dimension(
        self, dimension: str, name: str, limit: int
    ) -> dict[str, object]:
        """List exercises for one body part, equipment or muscle."""

    async def list_dimension_values(self, dimension: str) -> dict[str, object]:
        """List the known body parts, equipments or muscles."""


@dataclass
class HttpxExerciseDbClient(ExerciseDbClient):
    """HTTPX-backed ExerciseDB client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout: float = 15
    ) -> "HttpxExerciseDbClient":
        """Create an ExerciseDB client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": user_agent}, follow_redirects=True
            ),
            timeout=timeout,
        )

    async def _get(
        self, path: str, params: dict[str, str | int] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}{path}", params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def list_exercises(self, limit: int, offset: int) -> dict[str, object]:
        """List exercises page by page."""
        return await self._get("/exercises", {"limit": limit, "offset": offset})

    async def search_exercises(self, query: str, limit: int) -> dict[str, object]:
        """Fuzzy-search exercises by text."""
        return await self._get("/exercises/search", {"q": query, "limit": limit})

    async def filter_exercises(
        self, filters: dict[str, str], limit: int
    ) -> dict[str, object]:
        """Filter exercises; only the filters given are sent."""
        return await self._get("/exercises/filter", {**filters, "limit": limit})

    async def get_exercise(self, exercise_id: str) -> dict[str, object]:
        """Fetch a single exercise."""
        return await self._get(f"/exercises/{_segment(exercise_id)}")

    async def list_by_dimension(
        self, dimension: str, name: str, limit: int
    ) -> dict[str, object]:
        """List exercises under ``/<dimension>/<name>/exercises``."""
        return await self._get(
            f"/{dimension}/{_segment(name)}/exercises", {"limit": limit}
        )

    async def list_dimension_values(self, dimension: str) -> dict[str, object]:
        """List the values of ``bodyparts``, ``equipments`` or ``muscles``."""
        return await self._get(f"/{dimension}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
