import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def song_id(client):
    response = await client.post("/songs", json={
        "title": "Fix You", "year": 2005, "performer": "Coldplay", "genre": "Rock", "duration": 295,
    })
    return response.json()["result"]["songId"]


@pytest_asyncio.fixture
async def playlist_id(client, owner_headers):
    response = await client.post("/playlists", json={"name": "Lagu Indie Hits Indonesia"}, headers=owner_headers)
    assert response.status_code == 201
    return response.json()["result"]["playlistId"]


@pytest_asyncio.fixture
async def collaboration(client, playlist_id, owner_headers, guest_headers):
    response = await client.post(
        "/collaborations",
        json={"playlistId": playlist_id, "userId": guest_headers["X-User-Id"]},
        headers=owner_headers,
    )
    assert response.status_code == 201
    return response.json()["result"]["collaborationId"]


class TestPlaylistListing:

    @pytest.mark.asyncio
    async def test_listing_store_then_cache(self, client, playlist_id, owner_headers):
        first = await client.get("/playlists", headers=owner_headers)
        second = await client.get("/playlists", headers=owner_headers)

        assert first.headers["X-Data-Source"] == "store"
        assert second.headers["X-Data-Source"] == "cache"
        assert second.json()["result"]["playlists"] == [
            {"id": playlist_id, "name": "Lagu Indie Hits Indonesia", "username": "dicoding"}
        ]

    @pytest.mark.asyncio
    async def test_empty_listing_is_not_an_error(self, client, guest_headers):
        response = await client.get("/playlists", headers=guest_headers)

        assert response.status_code == 200
        assert response.json()["result"]["playlists"] == []

    @pytest.mark.asyncio
    async def test_collaborator_sees_shared_playlist_immediately(
        self, client, playlist_id, owner_headers, guest_headers
    ):
        # 협업 추가 전에 빈 목록이 캐시되어 있어도 무효화되어야 한다
        await client.get("/playlists", headers=guest_headers)

        await client.post(
            "/collaborations",
            json={"playlistId": playlist_id, "userId": guest_headers["X-User-Id"]},
            headers=owner_headers,
        )
        response = await client.get("/playlists", headers=guest_headers)

        assert response.headers["X-Data-Source"] == "store"
        assert [p["id"] for p in response.json()["result"]["playlists"]] == [playlist_id]

    @pytest.mark.asyncio
    async def test_deleting_playlist_clears_collaborator_listing(
        self, client, playlist_id, collaboration, owner_headers, guest_headers
    ):
        await client.get("/playlists", headers=guest_headers)

        response = await client.delete(f"/playlists/{playlist_id}", headers=owner_headers)
        assert response.status_code == 200

        listing = await client.get("/playlists", headers=guest_headers)
        assert listing.json()["result"]["playlists"] == []

    @pytest.mark.asyncio
    async def test_listing_requires_user(self, client):
        response = await client.get("/playlists")

        assert response.status_code == 401


class TestPlaylistAccess:

    @pytest.mark.asyncio
    async def test_collaborator_can_manage_songs(
        self, client, playlist_id, collaboration, song_id, guest_headers, owner_headers
    ):
        added = await client.post(f"/playlists/{playlist_id}/songs", json={"songId": song_id}, headers=guest_headers)
        assert added.status_code == 201

        detail = await client.get(f"/playlists/{playlist_id}/songs", headers=owner_headers)
        playlist = detail.json()["result"]["playlist"]
        assert playlist["username"] == "dicoding"
        assert [s["id"] for s in playlist["songs"]] == [song_id]

        removed = await client.request(
            "DELETE", f"/playlists/{playlist_id}/songs", json={"songId": song_id}, headers=owner_headers,
        )
        assert removed.status_code == 200

        activities = (await client.get(f"/playlists/{playlist_id}/activities", headers=guest_headers)).json()
        assert activities["result"]["playlistId"] == playlist_id
        assert [(a["username"], a["action"]) for a in activities["result"]["activities"]] == [
            ("johndoe", "add"),
            ("dicoding", "delete"),
        ]

    @pytest.mark.asyncio
    async def test_stranger_gets_forbidden(self, client, playlist_id, collaboration, song_id, stranger_headers):
        response = await client.post(f"/playlists/{playlist_id}/songs", json={"songId": song_id}, headers=stranger_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "AUTH-002"

    @pytest.mark.asyncio
    async def test_missing_playlist_is_404_before_access_check(self, client, owner_headers):
        response = await client.get("/playlists/playlist-missing/songs", headers=owner_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "PLAYLIST-001"

    @pytest.mark.asyncio
    async def test_collaborator_cannot_delete_playlist(self, client, playlist_id, collaboration, guest_headers):
        response = await client.delete(f"/playlists/{playlist_id}", headers=guest_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_song_is_404(self, client, playlist_id, owner_headers):
        response = await client.post(
            f"/playlists/{playlist_id}/songs", json={"songId": "song-missing"}, headers=owner_headers,
        )

        assert response.status_code == 404
        assert response.json()["code"] == "SONG-001"


class TestCollaborations:

    @pytest.mark.asyncio
    async def test_only_owner_manages_collaborators(self, client, playlist_id, collaboration, guest_headers):
        response = await client.request(
            "DELETE", "/collaborations",
            json={"playlistId": playlist_id, "userId": guest_headers["X-User-Id"]},
            headers=guest_headers,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_duplicate_collaboration(self, client, playlist_id, collaboration, owner_headers, guest_headers):
        response = await client.post(
            "/collaborations",
            json={"playlistId": playlist_id, "userId": guest_headers["X-User-Id"]},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "COLLAB-002"

    @pytest.mark.asyncio
    async def test_remove_collaborator(self, client, playlist_id, collaboration, owner_headers, guest_headers):
        response = await client.request(
            "DELETE", "/collaborations",
            json={"playlistId": playlist_id, "userId": guest_headers["X-User-Id"]},
            headers=owner_headers,
        )
        assert response.status_code == 200

        songs = await client.get(f"/playlists/{playlist_id}/songs", headers=guest_headers)
        assert songs.status_code == 403
