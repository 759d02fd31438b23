import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

PLACEHOLDER_REGISTRATION = "N/A"


class FleetClient:
    """
    Клієнт fleet-сервісу: truck_id -> номер реєстрації.
    Best-effort: будь-яка помилка логується і повертається "N/A".
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, timeout: float = 3.0):
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def resolve(self, truck_id: str) -> str:
        # id екрануємо повністю, щоб "/", "?" чи "#" не змінили шлях
        url = f"{self._base_url}/api/trucks/{quote(str(truck_id), safe='')}"
        try:
            response = await self._client.get(
                url,
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Failed to fetch truck registration (truck_id=%s, status=%s)",
                truck_id,
                e.response.status_code,
            )
            return PLACEHOLDER_REGISTRATION
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch truck registration (truck_id=%s): %s", truck_id, e)
            return PLACEHOLDER_REGISTRATION

        registration = data.get("registrationNo") if isinstance(data, dict) else None
        if not isinstance(registration, str) or not registration.strip():
            logger.warning(
                "Fleet service returned no usable registration (truck_id=%s, value=%r)",
                truck_id,
                registration,
            )
            return PLACEHOLDER_REGISTRATION
        return registration
