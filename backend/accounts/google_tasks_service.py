import logging
import os
from datetime import timedelta
from typing import Any, Dict, List
from urllib.parse import urlencode

import requests
from django.utils import timezone


logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"
TASKS_BASE_URL = "https://tasks.googleapis.com/tasks/v1"
TASKS_SCOPE = "https://www.googleapis.com/auth/tasks"


class GoogleTasksError(Exception):
    pass


class GoogleConfigurationError(GoogleTasksError):
    pass


class GoogleAuthExpired(GoogleTasksError):
    """The stored refresh token was rejected (invalid_grant); the user must reconnect."""


def _get_client_credentials():
    client_id = os.getenv("GOOGLE_CLIENT_ID")
    client_secret = os.getenv("GOOGLE_CLIENT_SECRET")
    if not client_id or not client_secret:
        raise GoogleConfigurationError("Google API credentials not configured on the server.")
    return client_id, client_secret


def build_consent_url(state: str, redirect_uri: str) -> str:
    """Google consent screen URL asking for offline access to the user's tasks."""
    client_id, _ = _get_client_credentials()
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": TASKS_SCOPE,
        "access_type": "offline",
        "prompt": "consent",
        "state": state,
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def _token_request(data: Dict[str, str]) -> Dict[str, Any]:
    try:
        resp = requests.post(GOOGLE_TOKEN_URL, data=data, timeout=10)
    except requests.RequestException as exc:
        raise GoogleTasksError(f"Could not reach Google: {exc}") from exc
    try:
        payload = resp.json()
    except ValueError:
        payload = {}
    if resp.status_code != 200:
        error = payload.get("error") or ""
        if error == "invalid_grant":
            raise GoogleAuthExpired(
                "Your connection to Google has expired or been revoked. "
                'Please go to "My Account" and reconnect your Google Account.'
            )
        logger.error(f"Google token endpoint returned {resp.status_code}: {resp.text}")
        raise GoogleTasksError(
            f"Google token request failed: {resp.status_code} - {payload.get('error_description') or error}"
        )
    return payload


def exchange_code(code: str, redirect_uri: str) -> Dict[str, Any]:
    """
    Trade an authorization code for tokens.
    Returns {"access_token", "refresh_token", "expiry", "scopes"}.
    """
    client_id, client_secret = _get_client_credentials()
    tokens = _token_request(
        {
            "code": code,
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }
    )
    if not all(tokens.get(k) for k in ("access_token", "refresh_token", "expires_in", "scope")):
        raise GoogleTasksError("Incomplete token set received from Google.")
    return {
        "access_token": tokens["access_token"],
        "refresh_token": tokens["refresh_token"],
        "expiry": timezone.now() + timedelta(seconds=int(tokens["expires_in"])),
        "scopes": tokens["scope"],
    }


def refresh_access_token(refresh_token: str) -> Dict[str, Any]:
    """Returns {"access_token", "expiry"}; raises GoogleAuthExpired on invalid_grant."""
    client_id, client_secret = _get_client_credentials()
    tokens = _token_request(
        {
            "refresh_token": refresh_token,
            "client_id": client_id,
            "client_secret": client_secret,
            "grant_type": "refresh_token",
        }
    )
    if not tokens.get("access_token"):
        raise GoogleTasksError("Google did not return an access token.")
    return {
        "access_token": tokens["access_token"],
        "expiry": timezone.now() + timedelta(seconds=int(tokens.get("expires_in") or 3600)),
    }


def revoke_token(token: str) -> None:
    try:
        resp = requests.post(GOOGLE_REVOKE_URL, params={"token": token}, timeout=10)
    except requests.RequestException as exc:
        raise GoogleTasksError(f"Could not reach Google: {exc}") from exc
    if resp.status_code != 200:
        raise GoogleTasksError(f"Token revocation failed: {resp.status_code} - {resp.text}")


def _tasks_post(access_token: str, path: str, body: Dict[str, Any], params=None) -> Dict[str, Any]:
    resp = requests.post(
        f"{TASKS_BASE_URL}{path}",
        json=body,
        params=params,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=10,
    )
    if resp.status_code != 200:
        raise GoogleTasksError(f"Google Tasks request failed: {resp.status_code} - {resp.text}")
    return resp.json()


def create_task_list_with_items(access_token: str, title: str, categories: List[Dict[str, Any]]) -> str:
    """
    Create a task list named ``title`` with one parent task per non-empty
    category and a child task per item. Returns the new task list id.
    """
    task_list = _tasks_post(access_token, "/users/@me/lists", {"title": title})
    task_list_id = task_list.get("id")
    if not task_list_id:
        raise GoogleTasksError("Failed to create the main task list in Google Tasks.")

    for category in categories:
        items = category.get("items") or []
        if not items:
            continue
        parent = _tasks_post(
            access_token, f"/lists/{task_list_id}/tasks", {"title": category["category_name"]}
        )
        parent_id = parent.get("id")
        if not parent_id:
            logger.warning(f"Could not create parent task for category: {category['category_name']}")
            continue
        for item in items:
            _tasks_post(
                access_token,
                f"/lists/{task_list_id}/tasks",
                {"title": item},
                params={"parent": parent_id},
            )
    return task_list_id
