import pytest
from django.urls import reverse

from trips.models import Document, FavoriteSpot


pytestmark = pytest.mark.django_db

DOCUMENT_PAYLOAD = {
    "name": "Caravan insurance",
    "description": "Policy schedule 2025",
    "file_url": "https://files.example.com/insurance.pdf",
    "tags": ["Insurance", "Insurance", "Receipt"],
}

SPOT_PAYLOAD = {
    "name": "Lake Eildon foreshore",
    "latitude": -37.23,
    "longitude": 145.91,
    "notes": "Free camping, bring water",
    "external_id": "places/abc123",
    "tags": ["free", "lakeside"],
}


def test_create_and_list_documents(auth_client, user, other_user):
    Document.objects.create(user=other_user, name="Not mine", file_url="https://example.com/x.pdf")

    response = auth_client.post(reverse("trips:document-list"), DOCUMENT_PAYLOAD, format="json")
    assert response.status_code == 201
    assert response.data["tags"] == ["Insurance", "Receipt"]
    assert Document.objects.get(id=response.data["id"]).user == user

    listing = auth_client.get(reverse("trips:document-list"))
    assert [d["name"] for d in listing.data] == ["Caravan insurance"]


def test_document_validation(auth_client):
    url = reverse("trips:document-list")
    assert auth_client.post(url, {**DOCUMENT_PAYLOAD, "file_url": "not a url"}, format="json").status_code == 400
    assert auth_client.post(url, {**DOCUMENT_PAYLOAD, "tags": ["Snacks"]}, format="json").status_code == 400
    assert auth_client.post(url, {**DOCUMENT_PAYLOAD, "name": ""}, format="json").status_code == 400


def test_update_and_delete_document(auth_client, user, other_user):
    mine = Document.objects.create(user=user, name="Rego", file_url="https://example.com/rego.pdf")
    theirs = Document.objects.create(user=other_user, name="Rego", file_url="https://example.com/rego.pdf")

    url = reverse("trips:document-detail", args=[mine.id])
    response = auth_client.patch(url, {"tags": ["Registration"]}, format="json")
    assert response.status_code == 200
    assert response.data["tags"] == ["Registration"]

    assert auth_client.get(reverse("trips:document-detail", args=[theirs.id])).status_code == 404
    assert auth_client.delete(url).status_code == 204
    assert not Document.objects.filter(id=mine.id).exists()


def test_create_favorite_spot(auth_client, user):
    response = auth_client.post(reverse("trips:favorite-spot-list"), SPOT_PAYLOAD, format="json")

    assert response.status_code == 201
    spot = FavoriteSpot.objects.get(id=response.data["id"])
    assert spot.user == user
    assert spot.external_id == "places/abc123"
    assert response.data["added_date"]


@pytest.mark.parametrize(
    "override",
    [{"latitude": 91}, {"latitude": -90.5}, {"longitude": -181}, {"longitude": 180.1}, {"name": ""}],
)
def test_favorite_spot_validation(auth_client, override):
    response = auth_client.post(reverse("trips:favorite-spot-list"), {**SPOT_PAYLOAD, **override}, format="json")
    assert response.status_code == 400


def test_favorite_spots_are_private(auth_client, other_user):
    spot = FavoriteSpot.objects.create(user=other_user, name="Secret spot", latitude=-33.0, longitude=151.0)

    assert auth_client.get(reverse("trips:favorite-spot-list")).data == []
    detail = reverse("trips:favorite-spot-detail", args=[spot.id])
    assert auth_client.get(detail).status_code == 404
    assert auth_client.delete(detail).status_code == 404
    assert FavoriteSpot.objects.filter(id=spot.id).exists()
