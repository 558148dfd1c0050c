from datetime import datetime


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Prep.ai Backend is running"
    assert body["timestamp"].endswith("Z")
    datetime.strptime(body["timestamp"], "%Y-%m-%dT%H:%M:%S.%fZ")


def test_cors_allows_frontend_origin_with_credentials(client):
    r = client.options(
        "/api/decks",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert r.headers["access-control-allow-credentials"] == "true"
