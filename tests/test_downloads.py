import io

import pytest

from app.imatrix.uploads import human_file_size


def _upload(client, headers, *, data: bytes = b"%PDF-1.4 manual", filename="manual.pdf", mimetype="application/pdf", **form):
    payload = {"file": (io.BytesIO(data), filename, mimetype), **form}
    return client.post("/downloads/upload", data=payload, headers=headers, content_type="multipart/form-data")


@pytest.mark.parametrize(
    "size,expected",
    [
        (2048, "2.00 KB"),
        (1024 * 1024, "1024.00 KB"),
        (1024 * 1024 + 1, "1024.00 KB"),
        (1024 * 1024 + 6000, "1.01 MB"),
        (int(1.5 * 1024 * 1024), "1.50 MB"),
    ],
)
def test_human_file_size(size, expected):
    assert human_file_size(size) == expected


def test_create_url_download(client, editor_headers):
    r = client.post(
        "/downloads",
        json={"title": "TrackZone v2.1", "fileUrl": "https://cdn.example.com/tz.zip", "kind": "software"},
        headers=editor_headers,
    )
    assert r.status_code == 201
    assert r.json["data"]["kind"] == "software"
    assert r.json["data"]["fileUrl"] == "https://cdn.example.com/tz.zip"


def test_create_url_download_requires_url(client, editor_headers):
    r = client.post("/downloads", json={"title": "No link"}, headers=editor_headers)
    assert r.status_code == 400
    assert r.json["error"] == "fileUrl is required for URL-based downloads"


def test_create_rejects_unknown_kind(client, editor_headers):
    r = client.post("/downloads", json={"title": "x", "fileUrl": "/x.pdf", "kind": "poster"}, headers=editor_headers)
    assert r.status_code == 400


def test_list_public_with_filters(client, editor_headers):
    client.post("/downloads", json={"title": "User Manual", "fileUrl": "/a.pdf"}, headers=editor_headers)
    client.post("/downloads", json={"title": "Catalog", "fileUrl": "/b.pdf", "kind": "brochure"}, headers=editor_headers)

    r = client.get("/downloads")
    assert [d["title"] for d in r.json["data"]] == ["Catalog", "User Manual"]
    assert [d["title"] for d in client.get("/downloads?kind=manual").json["data"]] == ["User Manual"]
    assert [d["title"] for d in client.get("/downloads?search=catal").json["data"]] == ["Catalog"]


def test_upload_download_and_serve(client, editor_headers):
    r = _upload(client, editor_headers, title="Install Guide", description="Step by step")
    assert r.status_code == 201, r.json
    data = r.json["data"]
    assert data["fileName"] == "manual.pdf"
    assert data["kind"] == "manual"
    assert data["fileSize"].endswith("KB")
    assert data["fileUrl"].startswith("/uploads/downloads/")
    assert data["fileUrl"].endswith("-manual.pdf")

    r = client.get(data["fileUrl"])
    assert r.status_code == 200
    assert r.data == b"%PDF-1.4 manual"
    assert "max-age=86400" in r.headers["Cache-Control"]
    r.close()


def test_upload_requires_file(client, editor_headers):
    r = client.post("/downloads/upload", data={"title": "x"}, headers=editor_headers, content_type="multipart/form-data")
    assert r.status_code == 400
    assert r.json["error"] == "No file uploaded"


def test_upload_requires_title(client, editor_headers):
    assert _upload(client, editor_headers).status_code == 400


def test_upload_rejects_type(client, editor_headers):
    r = _upload(client, editor_headers, filename="run.exe", mimetype="application/x-msdownload", title="Nope")
    assert r.status_code == 400
    assert "not allowed" in r.json["error"]


def test_upload_too_large(app, client, editor_headers):
    app.config["MAX_DOWNLOAD_FILE_SIZE"] = 10
    r = _upload(client, editor_headers, data=b"x" * 11, title="Big")
    assert r.status_code == 413
    assert r.json["error"] == "File too large"


def test_update_download(client, editor_headers):
    did = client.post("/downloads", json={"title": "Old", "fileUrl": "/a.pdf"}, headers=editor_headers).json["data"]["id"]
    r = client.patch(f"/downloads/{did}", json={"title": "New", "kind": "report"}, headers=editor_headers)
    assert r.status_code == 200
    assert r.json["data"]["title"] == "New"
    assert r.json["data"]["kind"] == "report"
    assert r.json["data"]["fileUrl"] == "/a.pdf"
    assert client.get(f"/downloads/id/{did}").json["data"]["title"] == "New"


def test_delete_uploaded_download_removes_file(tmp_path, client, admin_headers, editor_headers):
    data = _upload(client, editor_headers, title="Temp").json["data"]
    stored = list((tmp_path / "uploads" / "downloads").iterdir())
    assert len(stored) == 1

    assert client.delete(f"/downloads/{data['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/downloads/{data['id']}", headers=admin_headers).status_code == 200
    assert list((tmp_path / "uploads" / "downloads").iterdir()) == []
    assert client.get(data["fileUrl"]).status_code == 404
    assert client.delete(f"/downloads/{data['id']}", headers=admin_headers).status_code == 404
