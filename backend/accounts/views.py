import logging
from urllib.parse import quote

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.shortcuts import redirect
from django.urls import reverse
from rest_framework import generics, permissions, status
from rest_framework.authtoken.models import Token
from rest_framework.response import Response
from rest_framework.views import APIView

from .google_tasks_service import (
    GoogleAuthExpired,
    GoogleConfigurationError,
    GoogleTasksError,
    build_consent_url,
    create_task_list_with_items,
    exchange_code,
    refresh_access_token,
    revoke_token,
)
from .models import GoogleCredential, OAuthState, UserProfile
from .serializers import (
    GoogleTasksRequestSerializer,
    PreferencesSerializer,
    ProfileSerializer,
    RegisterSerializer,
    SessionSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterView(generics.CreateAPIView):
    """
    POST /api/accounts/register/
    Creates the user, their profile and an API token.
    """

    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def create(self, request, *args, **kwargs):
        logger.info(f"Registration request received for username: {request.data.get('username')}")

        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Registration validation errors: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        logger.info(f"User created successfully: {user.username}")
        return Response({**serializer.data, "token": token.key}, status=status.HTTP_201_CREATED)


class SessionView(APIView):
    """
    POST /api/accounts/session/    { "username" (or email), "password" }
    Starts a session (cookie) and returns the API token.

    DELETE /api/accounts/session/
    Ends the session and invalidates the token.
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def get_authenticators(self):
        if self.request is not None and self.request.method == "POST":
            return []
        return super().get_authenticators()

    def post(self, request, *args, **kwargs):
        serializer = SessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        identifier = serializer.validated_data["username"].strip()
        password = serializer.validated_data["password"]

        username = identifier
        if "@" in identifier:
            match = User.objects.filter(email__iexact=identifier).first()
            if match is not None:
                username = match.username

        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.warning(f"Failed login attempt for {identifier}")
            return Response(
                {"detail": "Invalid username/email or password."}, status=status.HTTP_401_UNAUTHORIZED
            )

        login(request, user)
        token, _ = Token.objects.get_or_create(user=user)
        profile = UserProfile.for_user(user)
        return Response(
            {
                "token": token.key,
                "user": {"id": user.id, "username": user.username, "email": user.email},
                "subscription_tier": profile.subscription_tier,
            }
        )

    def delete(self, request, *args, **kwargs):
        Token.objects.filter(user=request.user).delete()
        logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProfileView(generics.RetrieveUpdateAPIView):
    """
    GET/PUT/PATCH /api/accounts/profile/
    """

    serializer_class = ProfileSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return UserProfile.for_user(self.request.user)


class PreferencesView(APIView):
    """
    GET /api/accounts/preferences/
    PUT /api/accounts/preferences/   only the keys sent are changed
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        profile = UserProfile.for_user(request.user)
        return Response(PreferencesSerializer(profile, context={"request": request}).data)

    def put(self, request, *args, **kwargs):
        profile = UserProfile.for_user(request.user)
        serializer = PreferencesSerializer(
            profile, data=request.data, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    patch = put


def _google_redirect_uri(request) -> str:
    return request.build_absolute_uri(reverse("accounts:google-callback"))


def _account_redirect(query: str):
    return redirect(f"{settings.APP_URL}/my-account?{query}")


class GoogleConnectView(APIView):
    """
    POST /api/accounts/google/connect/
    Returns the Google consent URL; the browser is sent there next.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        oauth_state = OAuthState.issue(request.user)
        try:
            url = build_consent_url(oauth_state.state, _google_redirect_uri(request))
        except GoogleConfigurationError as exc:
            oauth_state.delete()
            logger.error(str(exc))
            return Response({"detail": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"url": url})


class GoogleCallbackView(APIView):
    """
    GET /api/accounts/google/callback/?code=...&state=...
    Google redirects here after consent. Always answers with a redirect back
    to the account page carrying ?success=... or ?error=...
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request, *args, **kwargs):
        if request.query_params.get("error"):
            logger.error(f"Google OAuth error: {request.query_params.get('error')}")
            return _account_redirect("error=google_auth_failed")

        code = request.query_params.get("code")
        state = request.query_params.get("state")
        if not code or not state:
            logger.error("Google OAuth: missing code or state parameter.")
            return _account_redirect("error=google_auth_invalid_response")

        oauth_state = OAuthState.objects.select_related("user").filter(state=state).first()
        if oauth_state is None:
            return _account_redirect("error=" + quote("Invalid state parameter. Please try connecting again."))
        # Single use, whatever happens next.
        user = oauth_state.user
        expired = oauth_state.is_expired
        oauth_state.delete()
        if expired:
            return _account_redirect("error=" + quote("Connection attempt expired. Please try again."))

        try:
            tokens = exchange_code(code, _google_redirect_uri(request))
        except GoogleTasksError as exc:
            logger.error(f"Google token exchange failed for user {user.id}: {exc}")
            return _account_redirect("error=" + quote(str(exc)))

        GoogleCredential.objects.update_or_create(user=user, defaults=tokens)
        logger.info(f"Google account connected for user {user.id}")
        return _account_redirect("success=google_auth_connected")


class GoogleDisconnectView(APIView):
    """
    POST /api/accounts/google/disconnect/
    Revokes the refresh token if Google will let us; the local credential is
    removed regardless.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        credential = GoogleCredential.objects.filter(user=request.user).first()
        if credential is None:
            return Response({"message": "Google account is not connected."})
        try:
            revoke_token(credential.refresh_token)
        except GoogleTasksError as exc:
            logger.warning(f"Could not revoke Google token for user {request.user.id}: {exc}")
        credential.delete()
        return Response({"message": "Google account disconnected."})


class GoogleTasksCreateView(APIView):
    """
    POST /api/accounts/google/tasks/
    { "trip_task_name": "...", "categories": [ { "category_name", "items": [...] } ] }
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        credential = GoogleCredential.objects.filter(user=request.user).first()
        if credential is None or not credential.refresh_token:
            return Response(
                {
                    "detail": "Google Account not connected or refresh token is missing. "
                    "Please reconnect your account."
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = GoogleTasksRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            refreshed = refresh_access_token(credential.refresh_token)
            credential.access_token = refreshed["access_token"]
            credential.expiry = refreshed["expiry"]
            credential.save(update_fields=["access_token", "expiry", "updated_at"])
            task_list_id = create_task_list_with_items(
                credential.access_token, data["trip_task_name"], data["categories"]
            )
        except GoogleAuthExpired as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_401_UNAUTHORIZED)
        except GoogleConfigurationError as exc:
            logger.error(str(exc))
            return Response({"detail": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except GoogleTasksError as exc:
            logger.error(f"Google Tasks export failed for user {request.user.id}: {exc}")
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(
            {
                "message": f'Successfully created task list "{data["trip_task_name"]}" in Google Tasks.',
                "task_list_id": task_list_id,
            }
        )
