import logging

import stripe
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import TIER_FREE, TIER_PRO, TIER_TRIALING, UserProfile

from .stripe_service import (
    BillingError,
    construct_event,
    create_checkout_session,
    create_customer,
    create_portal_session,
)

logger = logging.getLogger(__name__)


class CheckoutSessionView(APIView):
    """
    POST /api/billing/checkout/
    Returns {"url": ...} for Stripe's hosted checkout. The Stripe customer is
    created on first use and remembered on the profile.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        profile = UserProfile.for_user(request.user)
        try:
            if not profile.stripe_customer_id:
                profile.stripe_customer_id = create_customer(request.user.email, request.user.id)
                profile.save(update_fields=["stripe_customer_id", "updated_at"])
            url = create_checkout_session(profile.stripe_customer_id, request.user.id)
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=exc.status_code)
        return Response({"url": url})


class CustomerPortalView(APIView):
    """
    POST /api/billing/portal/
    Returns {"url": ...} for Stripe's customer portal.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        profile = UserProfile.for_user(request.user)
        if not profile.stripe_customer_id:
            return Response(
                {"detail": "No billing account found. Subscribe first."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            url = create_portal_session(profile.stripe_customer_id)
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=exc.status_code)
        return Response({"url": url})


def _profile_for_customer(customer_id, user_id=None):
    profile = None
    if user_id and str(user_id).isdigit():
        profile = UserProfile.objects.filter(user_id=int(user_id)).first()
    if profile is None and customer_id:
        profile = UserProfile.objects.filter(stripe_customer_id=customer_id).first()
    return profile


def _tier_for_status(subscription_status):
    if subscription_status == "active":
        return TIER_PRO
    if subscription_status == "trialing":
        return TIER_TRIALING
    return TIER_FREE


def _handle_checkout_completed(session):
    user_id = (session.get("metadata") or {}).get("userId") or session.get("client_reference_id")
    profile = _profile_for_customer(session.get("customer"), user_id)
    if profile is None:
        logger.warning(f"Checkout completed for unknown customer {session.get('customer')}")
        return
    profile.subscription_tier = TIER_PRO
    profile.subscription_status = "active"
    profile.stripe_customer_id = session.get("customer") or profile.stripe_customer_id
    profile.stripe_subscription_id = session.get("subscription") or profile.stripe_subscription_id
    profile.save()
    logger.info(f"User {profile.user_id} upgraded to {TIER_PRO}")


def _handle_subscription_changed(subscription, deleted=False):
    profile = _profile_for_customer(subscription.get("customer"))
    if profile is None:
        logger.warning(f"Subscription event for unknown customer {subscription.get('customer')}")
        return
    sub_status = "canceled" if deleted else subscription.get("status") or ""
    profile.subscription_status = sub_status
    profile.subscription_tier = TIER_FREE if deleted else _tier_for_status(sub_status)
    profile.stripe_subscription_id = None if deleted else subscription.get("id")
    profile.save()
    logger.info(f"User {profile.user_id} subscription is now {sub_status} ({profile.subscription_tier})")


class StripeWebhookView(APIView):
    """
    POST /api/billing/webhook/
    Called by Stripe; authenticated by the signature header only.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        signature = request.META.get("HTTP_STRIPE_SIGNATURE")
        if not signature:
            logger.warning("Stripe webhook signature missing")
            return Response({"detail": "Webhook signature missing."}, status=status.HTTP_400_BAD_REQUEST)

        try:
            event = construct_event(request.body, signature)
        except BillingError as exc:
            return Response({"detail": str(exc)}, status=exc.status_code)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            logger.error(f"Webhook signature verification failed: {exc}")
            return Response({"detail": f"Webhook Error: {exc}"}, status=status.HTTP_400_BAD_REQUEST)

        event_type = event["type"]
        obj = event["data"]["object"]
        logger.info(f"Stripe webhook received: {event_type}")

        if event_type == "checkout.session.completed":
            _handle_checkout_completed(obj)
        elif event_type == "customer.subscription.updated":
            _handle_subscription_changed(obj)
        elif event_type == "customer.subscription.deleted":
            _handle_subscription_changed(obj, deleted=True)
        elif event_type == "invoice.payment_failed":
            logger.warning(
                f"Invoice payment failed for subscription {obj.get('subscription')} "
                f"(customer {obj.get('customer')})"
            )
        else:
            logger.info(f"Unhandled Stripe event type: {event_type}")

        return Response({"received": True})
