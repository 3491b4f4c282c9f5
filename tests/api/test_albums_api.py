import pytest
import pytest_asyncio

from openmusic.core.config import RATE_LIMIT_PER_MINUTE


@pytest_asyncio.fixture
async def album_id(client):
    response = await client.post("/albums", json={"name": "Viva la Vida", "year": 2008})
    assert response.status_code == 201
    return response.json()["result"]["albumId"]


class TestAlbumEndpoints:

    @pytest.mark.asyncio
    async def test_add_and_get_album_with_songs(self, client, album_id):
        await client.post("/songs", json={
            "title": "Viva la Vida", "year": 2008, "performer": "Coldplay",
            "genre": "Pop", "duration": 242, "albumId": album_id,
        })

        response = await client.get(f"/albums/{album_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["isSuccess"] is True
        assert data["code"] == "COMMON200"
        album = data["result"]["album"]
        assert (album["name"], album["year"], album["coverUrl"]) == ("Viva la Vida", 2008, None)
        assert [song["title"] for song in album["songs"]] == ["Viva la Vida"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"name": "", "year": 2008},
        {"name": "Too Old", "year": 1899},
        {"name": "Future", "year": 9999},
        {"name": "No Year"},
    ])
    async def test_invalid_album_payload(self, client, payload):
        response = await client.post("/albums", json=payload)

        assert response.status_code == 422
        data = response.json()
        assert data["isSuccess"] is False
        assert data["code"] == "VALIDATION-001"

    @pytest.mark.asyncio
    async def test_missing_album_is_404(self, client):
        response = await client.get("/albums/album-missing")

        assert response.status_code == 404
        assert response.json()["code"] == "ALBUM-001"

    @pytest.mark.asyncio
    async def test_edit_and_delete_album(self, client, album_id):
        edited = await client.put(f"/albums/{album_id}", json={"name": "Prospekt's March", "year": 2008})
        assert edited.status_code == 200
        assert (await client.get(f"/albums/{album_id}")).json()["result"]["album"]["name"] == "Prospekt's March"

        deleted = await client.delete(f"/albums/{album_id}")
        assert deleted.status_code == 200
        assert (await client.get(f"/albums/{album_id}")).status_code == 404


class TestAlbumCovers:

    @pytest.mark.asyncio
    async def test_upload_cover_sets_cover_url(self, client, album_id, storage):
        response = await client.post(
            f"/albums/{album_id}/covers",
            files={"cover": ("cover.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        )

        assert response.status_code == 201
        cover_url = response.json()["result"]["coverUrl"]
        assert cover_url.startswith("http://test/albums/covers/")
        assert cover_url.endswith("cover.png")
        assert len(list(storage.folder.iterdir())) == 1

        album = (await client.get(f"/albums/{album_id}")).json()["result"]["album"]
        assert album["coverUrl"] == cover_url

    @pytest.mark.asyncio
    async def test_non_image_cover_is_rejected(self, client, album_id, storage):
        response = await client.post(
            f"/albums/{album_id}/covers",
            files={"cover": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ALBUM-002"
        assert list(storage.folder.iterdir()) == []

    @pytest.mark.asyncio
    async def test_oversized_cover_is_rejected(self, client, album_id, storage):
        storage.max_bytes = 4
        response = await client.post(
            f"/albums/{album_id}/covers",
            files={"cover": ("cover.png", b"12345", "image/png")},
        )

        assert response.status_code == 413


class TestAlbumLikes:
    """좋아요 등록/취소와 X-Data-Source 헤더로 캐시 경로 검증"""

    @pytest.mark.asyncio
    async def test_like_count_comes_from_store_then_cache(self, client, album_id, owner_headers, guest_headers):
        assert (await client.post(f"/albums/{album_id}/likes", headers=owner_headers)).status_code == 201
        assert (await client.post(f"/albums/{album_id}/likes", headers=guest_headers)).status_code == 201

        first = await client.get(f"/albums/{album_id}/likes")
        second = await client.get(f"/albums/{album_id}/likes")

        assert first.json()["result"] == {"likes": 2}
        assert first.headers["X-Data-Source"] == "store"
        assert second.json()["result"] == {"likes": 2}
        assert second.headers["X-Data-Source"] == "cache"

    @pytest.mark.asyncio
    async def test_unlike_invalidates_count(self, client, album_id, owner_headers, guest_headers):
        await client.post(f"/albums/{album_id}/likes", headers=owner_headers)
        await client.post(f"/albums/{album_id}/likes", headers=guest_headers)
        await client.get(f"/albums/{album_id}/likes")

        response = await client.delete(f"/albums/{album_id}/likes", headers=guest_headers)
        assert response.status_code == 200

        after = await client.get(f"/albums/{album_id}/likes")
        assert after.json()["result"] == {"likes": 1}
        assert after.headers["X-Data-Source"] == "store"

    @pytest.mark.asyncio
    async def test_duplicate_like_is_rejected(self, client, album_id, owner_headers):
        await client.post(f"/albums/{album_id}/likes", headers=owner_headers)

        response = await client.post(f"/albums/{album_id}/likes", headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "LIKE-002"

    @pytest.mark.asyncio
    async def test_album_without_likes_is_404(self, client, album_id):
        response = await client.get(f"/albums/{album_id}/likes")

        assert response.status_code == 404
        assert response.json()["code"] == "LIKE-003"
        assert "X-Data-Source" not in response.headers

    @pytest.mark.asyncio
    async def test_like_requires_known_user(self, client, album_id):
        missing = await client.post(f"/albums/{album_id}/likes")
        unknown = await client.post(f"/albums/{album_id}/likes", headers={"X-User-Id": "user-ghost"})

        assert missing.status_code == 401
        assert unknown.status_code == 401
        assert missing.json()["code"] == "AUTH-001"

    @pytest.mark.asyncio
    async def test_like_missing_album_is_404(self, client, owner_headers):
        response = await client.post("/albums/album-missing/likes", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "ALBUM-001"

    @pytest.mark.asyncio
    async def test_unlike_without_like_is_404(self, client, album_id, owner_headers):
        response = await client.delete(f"/albums/{album_id}/likes", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "LIKE-001"

    @pytest.mark.asyncio
    async def test_like_rate_limit(self, client, album_id, owner_headers):
        """같은 사용자의 좋아요 요청이 한도를 넘으면 429"""
        for _ in range(RATE_LIMIT_PER_MINUTE):
            response = await client.post(f"/albums/{album_id}/likes", headers=owner_headers)
            assert response.status_code != 429

        response = await client.post(f"/albums/{album_id}/likes", headers=owner_headers)

        assert response.status_code == 429
        data = response.json()
        assert data["isSuccess"] is False
        assert data["code"] == "RATE-001"
        assert "요청 횟수가 초과되었습니다" in data["message"]
