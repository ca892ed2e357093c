# stripe_mini.py
import logging
from dataclasses import dataclass
from typing import Optional

import stripe
from flask import Blueprint, render_template, current_app, request, jsonify, url_for

logger = logging.getLogger(__name__)

stripe_bp = Blueprint("stripe", __name__)

PURCHASE_TYPES = ("one-time", "subscription")


# -----------------------------
# Client-side collaborator: probe, client factory, redirect
# -----------------------------
def check_stripe_config() -> bool:
    """True when a publishable key is configured. Does not contact Stripe."""
    key = current_app.config.get("STRIPE_PUBLISHABLE_KEY") or ""
    return key.startswith("pk_")


@dataclass
class RedirectResult:
    url: Optional[str] = None
    error: Optional[str] = None


class StripeCheckoutClient:
    """Turns a checkout session id into the hosted payment page URL."""

    def __init__(self, api_key: str):
        self._api_key = api_key

    def redirect_to_checkout(self, session_id: str) -> RedirectResult:
        try:
            cs = stripe.checkout.Session.retrieve(session_id, api_key=self._api_key)
        except stripe.StripeError as e:
            logger.warning("Could not load checkout session %s: %s", session_id, e)
            return RedirectResult(error=e.user_message or str(e) or None)

        url = getattr(cs, "url", None)
        if not url:
            return RedirectResult(error="This checkout session has no payment page (it may have expired).")
        return RedirectResult(url=url)


def get_stripe() -> Optional[StripeCheckoutClient]:
    secret_key = current_app.config.get("STRIPE_SECRET_KEY") or ""
    if not secret_key:
        logger.error("STRIPE_SECRET_KEY is not configured")
        return None
    return StripeCheckoutClient(secret_key)


# -----------------------------
# Checkout-session endpoint
# -----------------------------
def _bad_request(message, status=400):
    return jsonify({"error": message}), status


def _site_root():
    return (current_app.config.get("SITE_URL") or request.url_root).rstrip("/")


def _line_item(item, recurring):
    """Build one Stripe line item from a posted item, or raise ValueError."""
    if not isinstance(item, dict):
        raise ValueError("Each item must be an object.")

    name = (item.get("name") or "").strip() if isinstance(item.get("name"), str) else ""
    if not name:
        raise ValueError("Each item needs a name.")

    price = item.get("price")
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise ValueError(f"Invalid price for '{name}'.")

    quantity = item.get("quantity", 1)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError(f"Invalid quantity for '{name}'.")

    product_data = {"name": name}
    description = item.get("description")
    if isinstance(description, str) and description.strip():
        product_data["description"] = description.strip()
    images = [img for img in (item.get("images") or []) if isinstance(img, str) and img.startswith("http")]
    if images:
        # Stripe accepts up to 8 images per product
        product_data["images"] = images[:8]

    price_data = {
        "currency": current_app.config.get("CURRENCY", "jpy"),
        "unit_amount": price,
        "product_data": product_data,
    }
    if recurring:
        price_data["recurring"] = {"interval": "month"}

    return {"price_data": price_data, "quantity": quantity}


@stripe_bp.post("/api/create-checkout-session")
def create_checkout_session():
    """
    Expected JSON payload:
      { "items": [{name, description, images, price, quantity}], "purchaseType": "one-time" }
    Returns { "sessionId": ... } or { "error": ... } with a 4xx/5xx status.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _bad_request("Request body must be a JSON object.")

    purchase_type = payload.get("purchaseType") or "one-time"
    if purchase_type not in PURCHASE_TYPES:
        return _bad_request(f"Unknown purchase type '{purchase_type}'.")

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        return _bad_request("No items to check out.")

    try:
        line_items = [_line_item(it, purchase_type == "subscription") for it in items]
    except ValueError as e:
        return _bad_request(str(e))

    secret_key = current_app.config.get("STRIPE_SECRET_KEY") or ""
    if not secret_key:
        logger.error("Checkout session requested but STRIPE_SECRET_KEY is missing")
        return _bad_request("The payment system is not configured.", 500)

    root = _site_root()
    try:
        cs = stripe.checkout.Session.create(
            api_key=secret_key,
            mode="subscription" if purchase_type == "subscription" else "payment",
            line_items=line_items,
            metadata={"purchase_type": purchase_type},
            success_url=root + url_for("stripe.checkout_success") + "?session_id={CHECKOUT_SESSION_ID}",
            cancel_url=root + url_for("stripe.checkout_cancel"),
        )
    except stripe.StripeError as e:
        logger.error("Stripe rejected checkout session: %s", e)
        return _bad_request(e.user_message or "The payment provider rejected the request.", 502)

    logger.info("Created checkout session %s (%s)", cs.id, purchase_type)
    return jsonify({"sessionId": cs.id})


@stripe_bp.get("/checkout/success")
def checkout_success():
    session_id = (request.args.get("session_id") or "").strip()
    return render_template("checkout_success.html", session_id=session_id)


@stripe_bp.get("/checkout/cancel")
def checkout_cancel():
    return render_template("checkout_cancel.html")
