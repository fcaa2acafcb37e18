import json
import logging
import os
from typing import Any, Dict

import stripe
from django.conf import settings


logger = logging.getLogger(__name__)


class BillingError(Exception):
    status_code = 502


class BillingConfigurationError(BillingError):
    status_code = 500


class PriceNotConfigured(BillingError):
    status_code = 503


def _configure() -> None:
    secret_key = os.getenv("STRIPE_SECRET_KEY")
    if not secret_key:
        raise BillingConfigurationError("Stripe is not configured on the server.")
    stripe.api_key = secret_key


def _pro_price_id() -> str:
    price_id = os.getenv("STRIPE_PRO_PRICE_ID")
    if not price_id:
        raise PriceNotConfigured("Subscription price is not configured. Please try again later.")
    return price_id


def create_customer(email: str, user_id: int) -> str:
    _configure()
    try:
        customer = stripe.Customer.create(email=email, metadata={"userId": str(user_id)})
    except stripe.StripeError as exc:
        logger.error(f"Stripe customer creation failed for user {user_id}: {exc}")
        raise BillingError(f"Could not create billing customer: {exc.user_message or exc}") from exc
    return customer["id"]


def create_checkout_session(customer_id: str, user_id: int) -> str:
    """Hosted Checkout for the Pro subscription. Returns the URL to send the user to."""
    _configure()
    price_id = _pro_price_id()
    try:
        session = stripe.checkout.Session.create(
            mode="subscription",
            customer=customer_id,
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            client_reference_id=str(user_id),
            metadata={"userId": str(user_id)},
            success_url=f"{settings.APP_URL}/subscribe/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{settings.APP_URL}/subscribe/cancel",
        )
    except stripe.StripeError as exc:
        logger.error(f"Stripe checkout session failed for user {user_id}: {exc}")
        raise BillingError(f"Could not start checkout: {exc.user_message or exc}") from exc
    return session["url"]


def create_portal_session(customer_id: str) -> str:
    _configure()
    try:
        session = stripe.billing_portal.Session.create(
            customer=customer_id,
            return_url=f"{settings.APP_URL}/my-account",
        )
    except stripe.StripeError as exc:
        logger.error(f"Stripe portal session failed for customer {customer_id}: {exc}")
        raise BillingError(f"Could not open the billing portal: {exc.user_message or exc}") from exc
    return session["url"]


def construct_event(payload, signature: str) -> Dict[str, Any]:
    """
    Verify a webhook delivery and return the event as plain dicts.
    Raises ValueError for a bad payload and stripe.SignatureVerificationError
    for a bad signature.
    """
    _configure()
    webhook_secret = os.getenv("STRIPE_WEBHOOK_SECRET")
    if not webhook_secret:
        raise BillingConfigurationError("Stripe webhook secret is not configured.")
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    stripe.WebhookSignature.verify_header(
        payload, signature, webhook_secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE
    )
    # StripeObject is not a dict in current stripe releases; handlers use .get()
    return json.loads(payload)
