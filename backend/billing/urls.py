from django.urls import path

from .views import CheckoutSessionView, CustomerPortalView, StripeWebhookView


app_name = "billing"


urlpatterns = [
    path("checkout/", CheckoutSessionView.as_view(), name="checkout"),
    path("portal/", CustomerPortalView.as_view(), name="portal"),
    path("webhook/", StripeWebhookView.as_view(), name="webhook"),
]
