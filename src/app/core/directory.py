"""
Candidate Directory Service Client

Keeps the external candidate directory in step with assigned matricules.
Every call is best-effort: remote failures are logged and never reach the
caller.

Endpoints:
- PUT  {base}/api/v1/candidate/update-matricule/{old}?newMatricule={new}
- POST {base}/api/v1/candidate/register-matricule  body {"matricule": new}
"""

import logging
from urllib.parse import quote

import httpx

from app.core.config import DirectoryServiceConfig, settings

logger = logging.getLogger(__name__)

UPDATE_MATRICULE_PATH = "/api/v1/candidate/update-matricule/{old_matricule}"
REGISTER_MATRICULE_PATH = "/api/v1/candidate/register-matricule"


class DirectoryServiceClient:
    """Best-effort HTTP client for the candidate directory."""

    def __init__(
        self,
        config: DirectoryServiceConfig,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self._http = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def update_matricule(self, old_matricule: str, new_matricule: str) -> bool:
        """Point the directory entry for ``old_matricule`` at ``new_matricule``."""
        path = UPDATE_MATRICULE_PATH.format(old_matricule=quote(old_matricule, safe=""))
        try:
            response = await self._http.put(path, params={"newMatricule": new_matricule})
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Directory service rejected matricule update {old_matricule} -> "
                f"{new_matricule}: {e.response.status_code}"
            )
        except httpx.RequestError as e:
            logger.error(f"Error communicating with the directory service: {e}")
        return False

    async def register_matricule(self, matricule: str) -> bool:
        """Register ``matricule`` as a fresh directory entry."""
        try:
            response = await self._http.post(
                REGISTER_MATRICULE_PATH, json={"matricule": matricule}
            )
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Directory service rejected registration of {matricule}: "
                f"{e.response.status_code} {e.response.text[:200]}"
            )
        except httpx.RequestError as e:
            logger.error(f"Error communicating with the directory service: {e}")
        return False

    async def sync_matricule(self, old_matricule: str | None, new_matricule: str) -> None:
        """
        Propagate a newly assigned matricule.

        Tries the old -> new update first, then always registers the new
        matricule, whatever the outcome of the update.
        """
        if not self.config.enabled:
            logger.info(f"Directory sync disabled, skipping matricule {new_matricule}")
            return

        if old_matricule:
            await self.update_matricule(old_matricule, new_matricule)
        else:
            logger.info("No previous matricule, skipping directory update")

        await self.register_matricule(new_matricule)


# Client instance shared by request handlers
directory_client: DirectoryServiceClient | None = None


async def init_directory_client() -> DirectoryServiceClient:
    """
    Create the shared directory client.

    Call this on application startup.
    """
    global directory_client
    directory_client = DirectoryServiceClient(DirectoryServiceConfig.from_settings(settings))
    return directory_client


async def get_directory_client() -> DirectoryServiceClient | None:
    """
    Get the directory client instance.

    Returns None before startup; matricule sync is then skipped.
    """
    return directory_client


async def close_directory_client() -> None:
    """Close the shared directory client."""
    global directory_client
    if directory_client:
        await directory_client.close()
        directory_client = None
