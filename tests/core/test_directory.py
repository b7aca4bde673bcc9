"""
Unit tests for the candidate directory client.
"""

import json

import httpx
import pytest

from app.core.config import DirectoryServiceConfig
from app.core.directory import DirectoryServiceClient

BASE_URL = "http://directory.test"


class RecordingDirectory:
    """Mock transport handler that records requests and answers per method."""

    def __init__(self, statuses: dict[str, int] | None = None, error: bool = False):
        self.statuses = statuses or {}
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.statuses.get(request.method, 200), json={"ok": True})


def make_client(handler, base_url: str = BASE_URL) -> DirectoryServiceClient:
    return DirectoryServiceClient(
        DirectoryServiceConfig(base_url=base_url),
        http_client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler)),
    )


class TestSyncMatricule:
    """Tests for DirectoryServiceClient.sync_matricule."""

    @pytest.mark.asyncio
    async def test_updates_then_registers(self):
        directory = RecordingDirectory()
        client = make_client(directory)

        await client.sync_matricule("CAND-0007", "2026ENG0007")
        await client.close()

        update, register = directory.requests
        assert update.method == "PUT"
        assert update.url.path == "/api/v1/candidate/update-matricule/CAND-0007"
        assert update.url.params["newMatricule"] == "2026ENG0007"
        assert register.method == "POST"
        assert register.url.path == "/api/v1/candidate/register-matricule"
        assert json.loads(register.content) == {"matricule": "2026ENG0007"}

    @pytest.mark.asyncio
    async def test_failed_update_still_registers(self, caplog):
        directory = RecordingDirectory(statuses={"PUT": 500})
        client = make_client(directory)

        await client.sync_matricule("CAND-0007", "2026ENG0007")
        await client.close()

        assert [r.method for r in directory.requests] == ["PUT", "POST"]
        assert "500" in caplog.text

    @pytest.mark.asyncio
    async def test_unreachable_directory_is_absorbed(self, caplog):
        directory = RecordingDirectory(error=True)
        client = make_client(directory)

        await client.sync_matricule("CAND-0007", "2026ENG0007")
        await client.close()

        assert [r.method for r in directory.requests] == ["PUT", "POST"]
        assert "connection refused" in caplog.text

    @pytest.mark.asyncio
    async def test_old_matricule_is_encoded_as_one_path_segment(self):
        directory = RecordingDirectory()
        client = make_client(directory)

        await client.sync_matricule("A/../../../admin/wipe?x=", "2026ENG0007")
        await client.close()

        update = directory.requests[0]
        raw_path = update.url.raw_path.split(b"?")[0]
        assert raw_path.startswith(b"/api/v1/candidate/update-matricule/A%2F..%2F")
        assert b"/admin/" not in raw_path
        assert dict(update.url.params) == {"newMatricule": "2026ENG0007"}

    @pytest.mark.asyncio
    async def test_without_previous_matricule_only_registers(self):
        directory = RecordingDirectory()
        client = make_client(directory)

        await client.sync_matricule(None, "2026LIC0003")
        await client.close()

        assert [r.method for r in directory.requests] == ["POST"]

    @pytest.mark.asyncio
    async def test_disabled_client_sends_nothing(self):
        directory = RecordingDirectory()
        client = make_client(directory, base_url="")

        await client.sync_matricule("CAND-0007", "2026ENG0007")
        await client.close()

        assert directory.requests == []


class TestSingleCalls:
    """Tests for the individual directory calls."""

    @pytest.mark.asyncio
    async def test_register_reports_success(self):
        client = make_client(RecordingDirectory())

        assert await client.register_matricule("2026ENG0007") is True
        await client.close()

    @pytest.mark.asyncio
    async def test_register_reports_rejection(self):
        client = make_client(RecordingDirectory(statuses={"POST": 409}))

        assert await client.register_matricule("2026ENG0007") is False
        await client.close()

    @pytest.mark.asyncio
    async def test_update_reports_unreachable(self):
        client = make_client(RecordingDirectory(error=True))

        assert await client.update_matricule("CAND-0007", "2026ENG0007") is False
        await client.close()
