from django.urls import path

from .views import (
    GoogleCallbackView,
    GoogleConnectView,
    GoogleDisconnectView,
    GoogleTasksCreateView,
    PreferencesView,
    ProfileView,
    RegisterView,
    SessionView,
)


app_name = "accounts"


urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("session/", SessionView.as_view(), name="session"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("preferences/", PreferencesView.as_view(), name="preferences"),
    path("google/connect/", GoogleConnectView.as_view(), name="google-connect"),
    path("google/callback/", GoogleCallbackView.as_view(), name="google-callback"),
    path("google/disconnect/", GoogleDisconnectView.as_view(), name="google-disconnect"),
    path("google/tasks/", GoogleTasksCreateView.as_view(), name="google-tasks"),
]
