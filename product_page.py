# product_page.py
"""
Product detail page controller.

One ``ProductPage`` is built per request ("mount"). It owns the page-local
state (active image, purchase type, loading flag, inline error, payment
availability) and runs the checkout hand-off:

    product page --POST json--> checkout-session endpoint --> {sessionId}
    sessionId --> payment client --> hosted checkout URL

Every failure along that chain ends up as ``state.error``; nothing is raised
to the caller.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlencode, urljoin

import requests

from catalog import Product
from errors import (
    CheckoutError,
    CheckoutSessionError,
    ClientInitError,
    ConfigurationError,
    RedirectError,
)

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "The payment system is not set up yet. Please contact the site administrator."
SESSION_FAILED_MESSAGE = "Failed to create the checkout session."
MISSING_SESSION_MESSAGE = "Could not obtain a checkout session id."
CLIENT_INIT_MESSAGE = "Could not start the payment client. Please check your browser settings."
REDIRECT_FAILED_MESSAGE = "Could not redirect to the checkout page."

ZERO_DECIMAL_CURRENCIES = {"jpy", "krw", "vnd", "clp"}
CURRENCY_SYMBOLS = {"jpy": "￥", "usd": "$", "eur": "€", "gbp": "£", "krw": "₩"}


class PurchaseType(str, enum.Enum):
    ONE_TIME = "one-time"
    SUBSCRIPTION = "subscription"


def format_price(amount, currency="jpy"):
    """Format an amount given in the smallest currency unit, e.g. 1000 -> '￥1,000'."""
    currency = (currency or "jpy").lower()
    symbol = CURRENCY_SYMBOLS.get(currency, currency.upper() + " ")
    amount = int(amount or 0)
    if currency in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{amount:,}"
    return f"{symbol}{amount / 100:,.2f}"


def resolve_image_url(image: str, base_url: str) -> str:
    # Site-relative paths need an absolute origin for the payment provider
    if image.startswith("/"):
        return f"{base_url.rstrip('/')}{image}"
    return image


def login_url_for(product_id: str) -> str:
    return "/login?" + urlencode({"redirect": f"/products/{product_id}"})


@dataclass
class PageState:
    active_image_index: int = 0
    purchase_type: PurchaseType = PurchaseType.ONE_TIME
    is_loading: bool = False
    error: str = ""
    payment_available: bool = False


@dataclass
class CheckoutOutcome:
    # Where the browser should go next; None means stay on the page
    navigate_to: Optional[str] = None


class ProductPage:
    def __init__(
        self,
        product: Product,
        user=None,
        *,
        probe: Callable[[], bool],
        client_factory: Callable,
        http=None,
        site_url: str = "",
        origin: str = "",
        checkout_url: str = "/api/create-checkout-session",
        timeout: float = 10,
    ):
        self.product = product
        self.user = user
        self.state = PageState()
        self._probe = probe
        self._client_factory = client_factory
        self._http = http or requests.Session()
        self._site_url = site_url
        self._origin = origin
        self._checkout_url = checkout_url
        self._timeout = timeout

    def __repr__(self):
        return f"<ProductPage {self.product.id} {self.state}>"

    # -----------------------------
    # Mount
    # -----------------------------
    def mount(self):
        """Run the payment capability probe once and record the result."""
        try:
            available = bool(self._probe())
        except Exception:
            logger.exception("Payment configuration check failed")
            available = False

        if available:
            logger.info("Payment configuration detected")
        else:
            logger.warning("Stripe publishable key is not configured")
        self.state.payment_available = available
        return self

    # -----------------------------
    # Local interaction state
    # -----------------------------
    def select_image(self, index):
        if index is None:
            return
        if 0 <= index < len(self.product.images):
            self.state.active_image_index = index
        else:
            logger.debug("Ignoring image index %s for product %s", index, self.product.id)

    def select_purchase_type(self, value):
        if value is None:
            return
        try:
            purchase_type = PurchaseType(value)
        except ValueError:
            logger.debug("Ignoring unknown purchase type %r", value)
            return
        if purchase_type is PurchaseType.SUBSCRIPTION and not self.product.is_subscription:
            return
        self.state.purchase_type = purchase_type

    @property
    def active_image(self) -> str:
        return self.product.images[self.state.active_image_index]

    @property
    def is_subscription_selected(self) -> bool:
        return self.state.purchase_type is PurchaseType.SUBSCRIPTION

    @property
    def display_price(self) -> int:
        # Subscription without its own price falls back to the list price
        if self.is_subscription_selected and self.product.subscription_price:
            return self.product.subscription_price
        return self.product.price

    @property
    def checkout_disabled(self) -> bool:
        return self.state.is_loading or not self.product.in_stock

    @property
    def checkout_label(self) -> str:
        if self.state.is_loading:
            return "Processing..."
        if not self.product.in_stock:
            return "Out of stock"
        return "Buy now"

    # -----------------------------
    # Checkout
    # -----------------------------
    def build_checkout_request(self):
        base_url = self._site_url or self._origin
        images = [resolve_image_url(img, base_url) for img in self.product.images]
        return {
            "items": [
                {
                    "name": self.product.name,
                    "description": self.product.description or "",
                    "images": images,
                    "price": self.display_price,
                    "quantity": 1,
                }
            ],
            "purchaseType": self.state.purchase_type.value,
        }

    def initiate_checkout(self) -> CheckoutOutcome:
        if self.checkout_disabled:
            logger.warning("Checkout for %s ignored: control is disabled", self.product.id)
            return CheckoutOutcome()

        if self.user is None:
            return CheckoutOutcome(navigate_to=login_url_for(self.product.id))

        try:
            if not self.state.payment_available:
                raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

            self.state.is_loading = True
            self.state.error = ""
            logger.info("Starting checkout for product %s", self.product.id)

            session_id = self._create_checkout_session()
            logger.info("Checkout session obtained: %s", session_id)

            client = self._client_factory()
            if client is None:
                raise ClientInitError(CLIENT_INIT_MESSAGE)

            result = client.redirect_to_checkout(session_id)
            if result.error or not result.url:
                logger.error("Redirect error: %s", result.error)
                raise RedirectError(result.error or REDIRECT_FAILED_MESSAGE)
        except CheckoutError as e:
            logger.error("Checkout failed for product %s: %s", self.product.id, e)
            self.state.error = e.message
            self.state.is_loading = False
            return CheckoutOutcome()

        # Loading stays on: the browser is leaving for the hosted page
        return CheckoutOutcome(navigate_to=result.url)

    def _create_checkout_session(self) -> str:
        url = urljoin(self._origin, self._checkout_url)
        try:
            response = self._http.post(url, json=self.build_checkout_request(), timeout=self._timeout)
        except requests.RequestException as e:
            raise CheckoutSessionError(f"{SESSION_FAILED_MESSAGE} ({e.__class__.__name__})") from e

        if not response.ok:
            message = SESSION_FAILED_MESSAGE
            try:
                data = response.json()
            except ValueError:
                logger.debug("Error response from %s was not JSON", url)
            else:
                if isinstance(data, dict) and data.get("error"):
                    message = str(data["error"])
            raise CheckoutSessionError(message)

        try:
            data = response.json()
        except ValueError:
            data = None
        session_id = data.get("sessionId") if isinstance(data, dict) else None
        if not session_id:
            raise CheckoutSessionError(MISSING_SESSION_MESSAGE)
        return session_id
