"""Tests for the /api/categories endpoints."""

from fastapi.testclient import TestClient

from app.schemas.category import slugify


def test_slugify():
    assert slugify("Luxury Homes") == "luxury-homes"
    assert slugify("  Beach & Coast  ") == "beach--coast"
    assert slugify("Öko Häuser 2") == "ko-huser-2"


def test_create_category_generates_slug(client: TestClient):
    response = client.post(
        "/api/categories",
        json={"name": "Luxury Homes", "description": "High-end residential properties"},
    )

    assert response.status_code == 201
    category = response.json()
    assert category["slug"] == "luxury-homes"
    assert client.get("/api/categories/luxury-homes").json()["name"] == "Luxury Homes"


def test_duplicate_slug_rejected(client: TestClient):
    payload = {"name": "Luxury Homes", "description": "High-end residential properties"}
    client.post("/api/categories", json=payload)

    response = client.post("/api/categories", json=payload)

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "slug"


def test_short_fields_rejected(client: TestClient):
    response = client.post("/api/categories", json={"name": "L", "description": "short"})

    assert response.status_code == 422
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"name", "description"}


def test_list_and_delete(client: TestClient):
    client.post("/api/categories", json={"name": "Rentals", "description": "Properties available for rent"})
    client.post("/api/categories", json={"name": "Land", "description": "Plots and undeveloped land"})

    body = client.get("/api/categories").json()
    assert body["total"] == 2
    assert [item["slug"] for item in body["items"]] == ["land", "rentals"]

    assert client.delete("/api/categories/land").status_code == 200
    assert client.get("/api/categories/land").status_code == 404
