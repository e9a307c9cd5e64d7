"""
API tests - routes exercised through TestClient with the processor and
scraper swapped for versions backed by fakes.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from findoc.api.deps import get_processor_dep, get_scraper_dep
from findoc.main import app

API_V1 = "/api/v1"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def client(processor, scraper):
    app.dependency_overrides[get_processor_dep] = lambda: processor
    app.dependency_overrides[get_scraper_dep] = lambda: scraper
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _upload(client, name, content, mime_type):
    return client.post(
        f"{API_V1}/files/upload",
        files={"file": (name, content, mime_type)},
    )


class TestRoot:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        for path in ("/health", f"{API_V1}/health"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json()["services"]["database"] == "healthy"


class TestFiles:

    def test_upload_csv(self, client):
        response = _upload(client, "figures.csv", b"Category,Amount\nRevenue,1000\nCosts,-200\n", "text/csv")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"

        data = body["data"]
        assert data["status"] == "completed"
        assert data["name"] == "figures.csv"
        assert data["extractedData"][0]["values"] == {"Revenue": 1000.0, "Costs": -200.0}
        assert data["metadata"]["rowCount"] == 2
        assert data["metadata"]["provenance"]["extractionMethod"] == "csv_parsing"

    def test_upload_unsupported_type(self, client):
        response = _upload(client, "archive.zip", b"PK\x03\x04", "application/zip")
        assert response.status_code == 415

    def test_upload_empty_file(self, client):
        response = _upload(client, "empty.csv", b"", "text/csv")
        assert response.status_code == 400

    def test_failed_extraction_is_stored_as_error(self, client):
        response = _upload(client, "broken.xlsx", b"not a workbook", XLSX)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "error"
        assert body["data"]["status"] == "error"
        assert "SpreadsheetExtractor" in body["data"]["error"]

        # reprocessing surfaces the mapped error
        file_id = body["data"]["id"]
        response = client.post(f"{API_V1}/files/{file_id}/process")
        assert response.status_code == 422
        assert response.json()["error"] == "ExtractionError"

    def test_list_get_reprocess_delete(self, client):
        file_id = _upload(
            client, "figures.csv", b"Category,Amount\nRevenue,5\n", "text/csv"
        ).json()["data"]["id"]

        listing = client.get(f"{API_V1}/files/uploads").json()
        assert file_id in [f["id"] for f in listing["files"]]

        completed = client.get(f"{API_V1}/files/uploads", params={"status": "completed"}).json()
        assert all(f["status"] == "completed" for f in completed["files"])

        assert client.get(f"{API_V1}/files/{file_id}").json()["status"] == "completed"

        reprocessed = client.post(f"{API_V1}/files/{file_id}/process")
        assert reprocessed.status_code == 200
        assert reprocessed.json()["extractedData"][0]["values"] == {"Revenue": 5.0}

        from findoc.core.database import FileUpload, SessionLocal
        with SessionLocal() as session:
            stored_path = Path(session.get(FileUpload, file_id).file_path)
        assert stored_path.exists()

        assert client.delete(f"{API_V1}/files/{file_id}").status_code == 200
        assert not stored_path.exists()
        assert client.get(f"{API_V1}/files/{file_id}").status_code == 404
        assert client.delete(f"{API_V1}/files/{file_id}").status_code == 404

    def test_unknown_file(self, client):
        assert client.post(f"{API_V1}/files/file_missing/process").status_code == 404


class TestScraping:

    def test_scrape_and_list(self, client):
        response = client.post(f"{API_V1}/scraping/scrape", json={"url": "https://example.com/results"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["metadata"]["tablesFound"] == 2
        assert len(body["financialRecords"]) == 2

        results = client.get(f"{API_V1}/scraping/results").json()
        summary = next(r for r in results if r["id"] == body["id"])
        assert summary["recordsFound"] == 2

        assert client.delete(f"{API_V1}/scraping/{body['id']}").status_code == 200
        assert client.delete(f"{API_V1}/scraping/{body['id']}").status_code == 404

    def test_failed_fetch_is_reported_in_body(self, client):
        response = client.post(f"{API_V1}/scraping/scrape", json={"url": "https://example.com/missing"})

        assert response.status_code == 200
        assert response.json()["status"] == "error"
        assert response.json()["title"] == "Error"

    def test_invalid_url(self, client):
        response = client.post(f"{API_V1}/scraping/scrape", json={"url": "not a url"})
        assert response.status_code == 422


class TestConnectors:

    def test_normalize_statements(self, client):
        payload = {
            "incomeStatements": [{"symbol": "ACME", "period": "2023", "data": {"revenue": 10}}],
        }
        response = client.post(f"{API_V1}/connectors/refinitiv/statements", json=payload)

        assert response.status_code == 200
        record = response.json()[0]
        assert record["statementType"] == "income_statement"
        assert record["metadata"]["source"] == {
            "source": "api",
            "apiEndpoint": "refinitiv",
            "extractionMethod": "api_call",
            "timestamp": record["metadata"]["source"]["timestamp"],
        }
