"""Shared fixtures: Flask app, test client and fakes for the checkout collaborators."""

import pytest
import requests

from app import create_app
from stripe_mini import RedirectResult


class FakeResponse:
    """Just enough of requests.Response for the checkout call."""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self.text or "", 0)
        return self._body


class FakeHttp:
    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse(200, {"sessionId": "cs_123"})
        self.exc = exc
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeStripeClient:
    def __init__(self, result=None):
        self.result = result or RedirectResult(url="https://checkout.stripe.com/c/pay/cs_123")
        self.session_ids = []

    def redirect_to_checkout(self, session_id):
        self.session_ids.append(session_id)
        return self.result


class CountingFactory:
    def __init__(self, client):
        self.client = client
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.client


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "SITE_URL": "",
            "STRIPE_PUBLISHABLE_KEY": "pk_test_123",
            "STRIPE_SECRET_KEY": "sk_test_123",
            "CURRENCY": "jpy",
            "CHECKOUT_SESSION_URL": "/api/create-checkout-session",
            "CHECKOUT_REQUEST_TIMEOUT": 5,
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in(client):
    with client.session_transaction() as sess:
        sess["user"] = {"email": "buyer@example.com"}
    return client


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def fake_stripe_client():
    return FakeStripeClient()
