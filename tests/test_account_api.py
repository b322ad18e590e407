"""Integration tests for the account profile and uploads."""

BASE = "http://minio:9000/storefront-media"


class TestProfile:
    def test_update_profile(self, client, customer_headers):
        response = client.patch("/v1/account", json={"city": "Springfield", "phone": "555-0100"}, headers=customer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["city"] == "Springfield"
        assert body["phone"] == "555-0100"
        assert body["first_name"] == "Sam"

    def test_profile_image_upload(self, client, customer_headers, minio_client):
        response = client.post(
            "/v1/account/profile-image",
            files={"file": ("me.jpg", b"\xff\xd8\xff jpeg", "image/jpeg")},
            headers=customer_headers,
        )

        assert response.status_code == 200
        assert response.json()["profile_image"].startswith(f"{BASE}/profiles/")
        assert len(minio_client.objects) == 1

    def test_profile_requires_login(self, client):
        assert client.get("/v1/account").status_code == 401


class TestUploadEndpoint:
    def test_upload_and_list(self, client, admin_headers):
        response = client.post(
            "/api/upload",
            params={"filename": "hero banner.webp"},
            content=b"RIFF webp",
            headers={**admin_headers, "Content-Type": "image/webp"},
        )

        assert response.status_code == 200
        blob = response.json()
        assert blob["pathname"].startswith("uploads/")
        assert blob["pathname"].endswith("-hero-banner.webp")
        assert blob["url"] == f"{BASE}/{blob['pathname']}"
        assert blob["contentType"] == "image/webp"

        listed = client.get("/api/upload", headers=admin_headers).json()
        assert [b["pathname"] for b in listed] == [blob["pathname"]]

    def test_filename_is_required(self, client, admin_headers):
        response = client.post("/api/upload", content=b"x", headers={**admin_headers, "Content-Type": "image/png"})

        assert response.status_code == 400
        assert response.json() == {"error": "Filename is required"}

    def test_upload_requires_admin(self, client, customer_headers):
        response = client.post("/api/upload", params={"filename": "a.png"}, content=b"x",
                               headers={**customer_headers, "Content-Type": "image/png"})

        assert response.status_code == 403
