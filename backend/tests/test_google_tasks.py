from datetime import timedelta
from unittest import mock

import pytest
from django.urls import reverse
from django.utils import timezone

from accounts import google_tasks_service
from accounts.google_tasks_service import (
    GoogleAuthExpired,
    GoogleTasksError,
    create_task_list_with_items,
    exchange_code,
    refresh_access_token,
)
from accounts.models import GoogleCredential, OAuthState


pytestmark = pytest.mark.django_db


def _response(status_code=200, payload=None):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.text = str(payload)
    resp.json.return_value = payload or {}
    return resp


@pytest.fixture
def google_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "client-id")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "client-secret")


@pytest.fixture
def credential(user):
    return GoogleCredential.objects.create(
        user=user, access_token="old-access", refresh_token="refresh-1", scopes=google_tasks_service.TASKS_SCOPE
    )


def test_exchange_code(google_env):
    payload = {"access_token": "a", "refresh_token": "r", "expires_in": 3600, "scope": "tasks"}
    with mock.patch.object(google_tasks_service.requests, "post", return_value=_response(payload=payload)) as post:
        tokens = exchange_code("the-code", "https://api.example.com/callback")

    assert tokens["access_token"] == "a"
    assert tokens["refresh_token"] == "r"
    assert tokens["expiry"] > timezone.now()
    assert post.call_args.kwargs["data"]["grant_type"] == "authorization_code"


def test_exchange_code_requires_refresh_token(google_env):
    payload = {"access_token": "a", "expires_in": 3600, "scope": "tasks"}
    with mock.patch.object(google_tasks_service.requests, "post", return_value=_response(payload=payload)):
        with pytest.raises(GoogleTasksError):
            exchange_code("the-code", "https://api.example.com/callback")


def test_refresh_invalid_grant_means_reconnect(google_env):
    with mock.patch.object(
        google_tasks_service.requests, "post", return_value=_response(400, {"error": "invalid_grant"})
    ):
        with pytest.raises(GoogleAuthExpired) as excinfo:
            refresh_access_token("stale")
    assert "reconnect" in str(excinfo.value)


def test_create_task_list_with_items():
    responses = [
        _response(payload={"id": "list-1"}),
        _response(payload={"id": "parent-1"}),
        _response(payload={"id": "child-1"}),
        _response(payload={"id": "child-2"}),
    ]
    categories = [
        {"category_name": "Kitchen", "items": ["Kettle", "Pans"]},
        {"category_name": "Empty", "items": []},
    ]
    with mock.patch.object(google_tasks_service.requests, "post", side_effect=responses) as post:
        list_id = create_task_list_with_items("token", "Trip packing", categories)

    assert list_id == "list-1"
    assert post.call_count == 4
    first = post.call_args_list[0]
    assert first.args[0].endswith("/users/@me/lists")
    assert first.kwargs["headers"] == {"Authorization": "Bearer token"}
    child = post.call_args_list[2]
    assert child.kwargs["params"] == {"parent": "parent-1"}
    assert child.kwargs["json"] == {"title": "Kettle"}


def test_connect_returns_consent_url(auth_client, user, google_env):
    response = auth_client.post(reverse("accounts:google-connect"))

    assert response.status_code == 200
    state = OAuthState.objects.get(user=user)
    assert f"state={state.state}" in response.data["url"]
    assert "access_type=offline" in response.data["url"]


def test_connect_without_configuration(auth_client, user, monkeypatch):
    monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
    monkeypatch.delenv("GOOGLE_CLIENT_SECRET", raising=False)
    response = auth_client.post(reverse("accounts:google-connect"))
    assert response.status_code == 500
    assert not OAuthState.objects.exists()


def test_callback_stores_credential(api_client, user, settings):
    settings.APP_URL = "https://app.example.com"
    state = OAuthState.issue(user)
    tokens = {"access_token": "a", "refresh_token": "r", "expiry": timezone.now(), "scopes": "tasks"}
    with mock.patch("accounts.views.exchange_code", return_value=tokens):
        response = api_client.get(reverse("accounts:google-callback"), {"code": "c", "state": state.state})

    assert response.status_code == 302
    assert response.url == "https://app.example.com/my-account?success=google_auth_connected"
    assert GoogleCredential.objects.get(user=user).refresh_token == "r"
    assert not OAuthState.objects.exists()


def test_callback_rejects_unknown_or_expired_state(api_client, user, settings):
    settings.APP_URL = "https://app.example.com"
    url = reverse("accounts:google-callback")

    response = api_client.get(url, {"code": "c", "state": "nope"})
    assert "error=" in response.url

    state = OAuthState.issue(user)
    OAuthState.objects.filter(id=state.id).update(created_at=timezone.now() - timedelta(minutes=30))
    with mock.patch("accounts.views.exchange_code") as exchange:
        response = api_client.get(url, {"code": "c", "state": state.state})
    assert "expired" in response.url
    exchange.assert_not_called()
    assert not GoogleCredential.objects.exists()


def test_callback_missing_code(api_client, settings):
    settings.APP_URL = "https://app.example.com"
    response = api_client.get(reverse("accounts:google-callback"), {"state": "s"})
    assert response.url.endswith("error=google_auth_invalid_response")


def test_disconnect_removes_credential_even_if_revoke_fails(auth_client, credential):
    with mock.patch("accounts.views.revoke_token", side_effect=GoogleTasksError("nope")):
        response = auth_client.post(reverse("accounts:google-disconnect"))
    assert response.status_code == 200
    assert not GoogleCredential.objects.exists()


def test_create_tasks_requires_connection(auth_client):
    body = {"trip_task_name": "Packing", "categories": [{"category_name": "Kitchen", "items": ["Kettle"]}]}
    response = auth_client.post(reverse("accounts:google-tasks"), body, format="json")
    assert response.status_code == 400


def test_create_tasks(auth_client, credential):
    body = {"trip_task_name": "Packing", "categories": [{"category_name": "Kitchen", "items": ["Kettle"]}]}
    refreshed = {"access_token": "new-access", "expiry": timezone.now() + timedelta(hours=1)}
    with mock.patch("accounts.views.refresh_access_token", return_value=refreshed), mock.patch(
        "accounts.views.create_task_list_with_items", return_value="list-9"
    ) as create:
        response = auth_client.post(reverse("accounts:google-tasks"), body, format="json")

    assert response.status_code == 200
    assert response.data["task_list_id"] == "list-9"
    assert create.call_args.args[0] == "new-access"
    credential.refresh_from_db()
    assert credential.access_token == "new-access"


def test_create_tasks_with_revoked_grant(auth_client, credential):
    body = {"trip_task_name": "Packing", "categories": [{"category_name": "Kitchen", "items": ["Kettle"]}]}
    with mock.patch("accounts.views.refresh_access_token", side_effect=GoogleAuthExpired("reconnect")):
        response = auth_client.post(reverse("accounts:google-tasks"), body, format="json")
    assert response.status_code == 401
