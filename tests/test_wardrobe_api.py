"""Wardrobe endpoints against a temporary SQLite database and media directory."""

from __future__ import annotations

from dataclasses import replace
from io import BytesIO
from pathlib import Path
from typing import Iterator

import pytest
import pytest_mock
from fastapi.testclient import TestClient
from PIL import Image

from outfitgen.api.main import create_app
from outfitgen.config.settings import Settings
from outfitgen.services.wardrobe import WardrobeError, WardrobeService


def _png() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), (90, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def _upload(client: TestClient, item_type: str, user_id: str = "user-1") -> dict[str, object]:
    response = client.post(
        "/api/upload-image",
        files={"file": ("shirt.png", _png(), "image/png")},
        data={"type": item_type, "userId": user_id},
    )
    assert response.status_code == 200, response.text
    return response.json()["item"]


def test_upload_stores_file_and_row(client: TestClient, settings: Settings) -> None:
    item = _upload(client, "top")

    assert item["type"] == "top"
    assert item["user_id"] == "user-1"
    assert item["image_url"].startswith("/media/tops/user-1/")
    assert item["image_url"].endswith(".png")

    stored = Path(settings.media_root) / item["image_url"].removeprefix("/media/")
    assert stored.read_bytes() == _png()
    assert client.get(item["image_url"]).content == _png()


def test_upload_requires_fields(client: TestClient) -> None:
    response = client.post(
        "/api/upload-image",
        files={"file": ("shirt.png", _png(), "image/png")},
        data={"type": "top"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_upload_rejects_unsupported_type(client: TestClient) -> None:
    response = client.post(
        "/api/upload-image",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"type": "top", "userId": "user-1"},
    )

    assert response.status_code == 400
    assert "Invalid file type" in response.json()["error"]


def test_upload_rejects_unknown_clothing_type(client: TestClient) -> None:
    response = client.post(
        "/api/upload-image",
        files={"file": ("hat.png", _png(), "image/png")},
        data={"type": "hat", "userId": "user-1"},
    )

    assert response.status_code == 400


def test_list_clothing_filters_by_type_and_user(client: TestClient) -> None:
    top = _upload(client, "top")
    bottom = _upload(client, "bottom")
    _upload(client, "top", user_id="someone-else")

    everything = client.get("/api/clothing", params={"userId": "user-1"}).json()["items"]
    tops = client.get("/api/clothing", params={"userId": "user-1", "type": "top"}).json()["items"]

    assert [item["id"] for item in everything] == [bottom["id"], top["id"]]
    assert [item["id"] for item in tops] == [top["id"]]


def test_list_clothing_requires_user(client: TestClient) -> None:
    response = client.get("/api/clothing")

    assert response.status_code == 400


def test_delete_clothing_removes_file(client: TestClient, settings: Settings) -> None:
    item = _upload(client, "bottom")
    stored = Path(settings.media_root) / item["image_url"].removeprefix("/media/")

    response = client.delete(f"/api/clothing/{item['id']}")

    assert response.json() == {"success": True}
    assert not stored.exists()
    assert client.get("/api/clothing", params={"userId": "user-1"}).json()["items"] == []


def test_delete_unknown_item_is_not_found(client: TestClient) -> None:
    response = client.delete("/api/clothing/does-not-exist")

    assert response.status_code == 404


def test_save_and_list_outfits(client: TestClient) -> None:
    top = _upload(client, "top")
    bottom = _upload(client, "bottom")

    saved = client.post(
        "/api/save-outfit",
        json={
            "userId": "user-1",
            "topId": top["id"],
            "bottomId": bottom["id"],
            "resultImageUrl": "data:image/png;base64,QUJD",
        },
    )
    assert saved.status_code == 200
    outfit = saved.json()["outfit"]

    outfits = client.get("/api/outfits", params={"userId": "user-1"}).json()["outfits"]

    assert [entry["id"] for entry in outfits] == [outfit["id"]]
    assert outfits[0]["top_id"] == top["id"]
    assert outfits[0]["bottom_id"] == bottom["id"]


def test_save_outfit_requires_fields(client: TestClient) -> None:
    response = client.post("/api/save-outfit", json={"userId": "user-1"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_wardrobe_disabled_without_database(settings: Settings) -> None:
    with TestClient(create_app(replace(settings, database_url=""))) as client:
        response = client.get("/api/clothing", params={"userId": "user-1"})

    assert response.status_code == 400
    assert response.json() == {"error": "Wardrobe storage is not enabled"}


@pytest.mark.parametrize("user_id", ["../../../escape", "../bottoms", "a/b", "a\\b"])
def test_upload_rejects_path_like_user_id(client: TestClient, settings: Settings, user_id: str) -> None:
    response = client.post(
        "/api/upload-image",
        files={"file": ("shirt.png", _png(), "image/png")},
        data={"type": "top", "userId": user_id},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid userId"}
    assert not (Path(settings.media_root) / "bottoms").exists()


@pytest.mark.asyncio
async def test_storage_key_rejection_is_client_error(mocker: pytest_mock.MockerFixture) -> None:
    storage = mocker.Mock()
    storage.save = mocker.AsyncMock(side_effect=ValueError("Storage key escapes the storage root"))
    session = mocker.AsyncMock()

    with pytest.raises(WardrobeError) as excinfo:
        await WardrobeService(storage).upload_item(
            session,
            user_id="user-1",
            item_type="top",
            file_name="shirt.png",
            file_data=b"data",
        )

    assert excinfo.value.status_code == 400
    session.add.assert_not_called()
