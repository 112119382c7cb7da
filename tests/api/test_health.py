"""Health probes - liveness always up, readiness reflects the database manager."""


async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "effect-service"


async def test_readiness_without_database_returns_503(client, monkeypatch):
    import effect_service.infrastructure.database as database

    monkeypatch.setattr(database, "db_manager", None)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["reason"] == "database_unavailable"
