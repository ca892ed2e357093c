# products.py
import logging

import requests
from flask import Blueprint, render_template, current_app, request, redirect

from auth import get_current_user
from catalog import find_product
from product_page import ProductPage
from stripe_mini import check_stripe_config, get_stripe

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__, url_prefix="/products")


def _http_session():
    return requests.Session()


def _build_page(product, values):
    """Mount a ProductPage for this request, restoring image / purchase type from ``values``."""
    cfg = current_app.config
    page = ProductPage(
        product,
        get_current_user(),
        probe=check_stripe_config,
        client_factory=get_stripe,
        http=_http_session(),
        site_url=cfg.get("SITE_URL") or "",
        origin=request.url_root,
        checkout_url=cfg.get("CHECKOUT_SESSION_URL") or "/api/create-checkout-session",
        timeout=cfg.get("CHECKOUT_REQUEST_TIMEOUT", 10),
    )
    page.mount()
    page.select_image(values.get("image", type=int))
    page.select_purchase_type(values.get("purchase_type"))
    return page


def _not_found():
    return render_template("product_not_found.html", back_url=request.referrer or "/"), 404


@products_bp.get("/<product_id>")
def product_detail(product_id):
    product = find_product(product_id)
    if product is None:
        return _not_found()
    page = _build_page(product, request.args)
    return render_template("product_detail.html", page=page, product=product)


@products_bp.post("/<product_id>/checkout")
def checkout(product_id):
    product = find_product(product_id)
    if product is None:
        return _not_found()

    page = _build_page(product, request.form)
    outcome = page.initiate_checkout()
    if outcome.navigate_to:
        # 303 so the browser follows with GET
        return redirect(outcome.navigate_to, code=303)
    return render_template("product_detail.html", page=page, product=product)
