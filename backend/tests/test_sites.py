"""Tests for serving, the site directory and admin endpoints.

Covers:
- Root and named-file serving, 404 bodies, last_accessed touch ordering
- Site info (live file list), listing order, deletion and its partial failure
- Admin stats, formatted admin listing, orphan scan
- Landing page, health check, JSON error shape
"""

import re
import uuid
from datetime import datetime

import httpx
from sqlalchemy import update

from pagedrop.models import HostedSite
from pagedrop.utils.exceptions import StorageError

OLD = datetime(2000, 1, 1, 0, 0, 0)


def _upload(client, *names):
    files = [("files", (name, f"<p>{name}</p>".encode(), "text/html")) for name in names]
    resp = client.post("/api/upload", files=files)
    assert resp.status_code == 200, resp.text
    return resp.json()["siteId"]


def _age(db_session, site_id):
    db_session.execute(
        update(HostedSite).where(HostedSite.site_id == site_id).values(last_accessed=OLD)
    )
    db_session.commit()


def _last_accessed(db_session, site_id):
    db_session.expire_all()
    return db_session.query(HostedSite).filter_by(site_id=site_id).one().last_accessed


class TestServeRoot:
    def test_index_preferred(self, client):
        site_id = _upload(client, "other.html", "index.html")
        assert client.get(f"/site/{site_id}").text == "<p>index.html</p>"

    def test_first_html_fallback(self, client):
        site_id = _upload(client, "other.html")
        assert client.get(f"/site/{site_id}").text == "<p>other.html</p>"

    def test_first_file_fallback(self, client, deploy_code):
        site_id = deploy_code(code="a,b\n1,2\n", filename="table.csv")
        resp = client.get(f"/site/{site_id}")
        assert resp.status_code == 200
        assert resp.text == "a,b\n1,2\n"

    def test_empty_site(self, client, store, deploy_code):
        site_id = deploy_code()
        (store.site_path(site_id) / "index.html").unlink()

        resp = client.get(f"/site/{site_id}")
        assert resp.status_code == 404
        assert resp.text == "No files found in site"
        assert resp.headers["content-type"].startswith("text/plain")

    def test_unknown_site(self, client):
        resp = client.get(f"/site/{uuid.uuid4()}")
        assert resp.status_code == 404
        assert resp.text == "Site not found"

    def test_malformed_site_id(self, client):
        resp = client.get("/site/not-a-site")
        assert resp.status_code == 404
        assert resp.text == "Site not found"

    def test_serve_touches_last_accessed(self, client, db_session, deploy_code):
        site_id = deploy_code()
        _age(db_session, site_id)

        client.get(f"/site/{site_id}")
        assert _last_accessed(db_session, site_id) > OLD

    def test_missing_directory_does_not_touch(self, client, db_session, store, deploy_code):
        site_id = deploy_code()
        _age(db_session, site_id)
        store.remove(site_id)

        resp = client.get(f"/site/{site_id}")
        assert resp.status_code == 404
        assert resp.text == "Site not found"
        assert _last_accessed(db_session, site_id) == OLD


class TestServeFile:
    def test_named_file(self, client):
        site_id = _upload(client, "index.html", "about.html")
        resp = client.get(f"/site/{site_id}/about.html")
        assert resp.status_code == 200
        assert resp.text == "<p>about.html</p>"

    def test_missing_file(self, client, deploy_code):
        site_id = deploy_code()
        resp = client.get(f"/site/{site_id}/nope.html")
        assert resp.status_code == 404
        assert resp.text == "File not found"

    def test_missing_file_still_touches(self, client, db_session, deploy_code):
        site_id = deploy_code()
        _age(db_session, site_id)

        client.get(f"/site/{site_id}/nope.html")
        assert _last_accessed(db_session, site_id) > OLD

    def test_unknown_site(self, client):
        resp = client.get(f"/site/{uuid.uuid4()}/index.html")
        assert resp.status_code == 404
        assert resp.text == "Site not found"

    def test_backslash_name_not_served(self, client, deploy_code):
        site_id = deploy_code()
        resp = client.get(f"/site/{site_id}/..%5Cindex.html")
        assert resp.status_code == 404
        assert resp.text == "File not found"


class TestSiteInfo:
    def test_info(self, client, store, deploy_code):
        site_id = deploy_code(project_name="Info")
        resp = client.get(f"/api/site/{site_id}/info")
        assert resp.status_code == 200
        body = resp.json()
        assert body["site_id"] == site_id
        assert body["name"] == "Info"
        assert body["type"] == "code"
        assert body["url"] == f"http://testserver/site/{site_id}"
        assert body["files"] == [{"name": "index.html", "path": f"/site/{site_id}/index.html"}]

    def test_info_lists_live_files(self, client, store, deploy_code):
        site_id = deploy_code()
        store.write_bytes(site_id, "extra.css", b"p{}")

        body = client.get(f"/api/site/{site_id}/info").json()
        assert [f["name"] for f in body["files"]] == ["extra.css", "index.html"]
        assert body["file_count"] == 1

    def test_info_unknown(self, client):
        resp = client.get(f"/api/site/{uuid.uuid4()}/info")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Site not found"}

    def test_public_base_url(self, app, client, deploy_code):
        app.state.settings = app.state.settings.model_copy(
            update={"public_base_url": "https://pages.example.org/"}
        )
        site_id = deploy_code()
        body = client.get(f"/api/site/{site_id}/info").json()
        assert body["url"] == f"https://pages.example.org/site/{site_id}"


class TestListSites:
    def test_empty(self, client):
        assert client.get("/api/sites").json() == []

    def test_newest_first(self, client, deploy_code):
        first = deploy_code(project_name="first")
        second = deploy_code(project_name="second")

        sites = client.get("/api/sites").json()
        assert [s["site_id"] for s in sites] == [second, first]
        assert all(s["url"].endswith(f"/site/{s['site_id']}") for s in sites)


class TestDeleteSite:
    def test_delete_twice(self, client, store, deploy_code):
        site_id = deploy_code()

        resp = client.delete(f"/api/site/{site_id}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Site deleted successfully"}
        assert not store.exists(site_id)
        assert client.get(f"/site/{site_id}").status_code == 404

        resp = client.delete(f"/api/site/{site_id}")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Site not found"}

    def test_delete_unknown(self, client):
        assert client.delete(f"/api/site/{uuid.uuid4()}").status_code == 404

    def test_delete_without_directory(self, client, store, deploy_code):
        site_id = deploy_code()
        store.remove(site_id)
        assert client.delete(f"/api/site/{site_id}").status_code == 200

    def test_directory_removal_failure_leaves_orphan(self, client, store, db_session, deploy_code, monkeypatch):
        site_id = deploy_code()

        def fail(removed_id):
            raise StorageError(f"Cannot remove site {removed_id}: permission denied")

        monkeypatch.setattr(store, "remove", fail)
        resp = client.delete(f"/api/site/{site_id}")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to delete site"}

        db_session.expire_all()
        assert db_session.query(HostedSite).filter_by(site_id=site_id).first() is None
        assert store.exists(site_id)
        assert client.get("/api/admin/orphans").json() == {"orphans": [site_id], "count": 1}


class TestAdmin:
    def test_stats(self, client, deploy_code, mock_fetch):
        deploy_code()
        deploy_code()
        _upload(client, "index.html")
        mock_fetch(lambda request: httpx.Response(200, text="<p>x</p>"))
        client.post("/api/deploy-url", json={"url": "https://example.com/"})

        stats = client.get("/api/admin/stats").json()
        assert stats == {"totalSites": 4, "uploads": 1, "codes": 2, "urls": 1}
        assert stats["totalSites"] == stats["uploads"] + stats["codes"] + stats["urls"]

    def test_stats_empty(self, client):
        assert client.get("/api/admin/stats").json() == {
            "totalSites": 0, "uploads": 0, "codes": 0, "urls": 0,
        }

    def test_admin_sites_formatting(self, client, deploy_code):
        site_id = deploy_code(code="x" * 2048)
        sites = client.get("/api/admin/sites").json()
        assert len(sites) == 1
        site = sites[0]
        assert site["site_id"] == site_id
        assert site["size_bytes"] == 2048
        assert site["size_mb"] == "0.00"
        assert re.fullmatch(r"\d{2}/\d{2}/\d{4}, \d{2}:\d{2}:\d{2} [AP]M", site["created_at"])
        assert re.fullmatch(r"\d{2}/\d{2}/\d{4}, \d{2}:\d{2}:\d{2} [AP]M", site["last_accessed"])
        assert site["url"] == f"http://testserver/site/{site_id}"

    def test_orphans(self, client, store, deploy_code):
        deploy_code()
        orphan = str(uuid.uuid4())
        store.create(orphan)

        body = client.get("/api/admin/orphans").json()
        assert body == {"orphans": [orphan], "count": 1}


class TestAppSurface:
    def test_landing_page(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "PageDrop" in resp.text

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_unknown_route_error_shape(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}
