"""Tests for API key endpoints."""

from unittest.mock import patch

from httpx import AsyncClient

from booker.models.failure import CredentialUnavailableError
from booker.services.session import BookerSession


class TestCredentialEndpoints:
    async def test_no_key(self, client: AsyncClient) -> None:
        response = await client.get("/credential")

        assert response.status_code == 200
        assert response.json() == {"api_key": "", "has_key": False, "status": ""}

    async def test_generate(self, client: AsyncClient, booker: BookerSession) -> None:
        response = await client.post("/credential/generate")

        assert response.status_code == 200
        data = response.json()
        assert data["api_key"].startswith("booker_")
        assert data["has_key"] is True
        assert booker.store.credential == data["api_key"]

    async def test_generate_without_secure_random(self, client: AsyncClient) -> None:
        with patch(
            "booker.services.session.generate_api_key",
            side_effect=CredentialUnavailableError("no urandom"),
        ):
            response = await client.post("/credential/generate")

        assert response.status_code == 503
        data = response.json()
        assert data["outcome"] == "known_failure"
        assert data["failure"]["kind"] == "service_unavailable"
        assert data["failure"]["detail"] == "no urandom"

    async def test_copy(self, client: AsyncClient, booker: BookerSession) -> None:
        booker.store.set_credential("booker_abc")

        response = await client.post("/credential/copy")

        data = response.json()
        assert data["api_key"] == "booker_abc"
        assert data["status"].startswith("Copied key.")

    async def test_clear_requires_confirm(self, client: AsyncClient, booker: BookerSession) -> None:
        booker.store.set_credential("booker_abc")

        declined = await client.post("/credential/clear", json={"confirm": False})
        assert declined.json()["api_key"] == "booker_abc"

        cleared = await client.post("/credential/clear", json={"confirm": True})
        assert cleared.json()["has_key"] is False
        assert booker.store.credential == ""
