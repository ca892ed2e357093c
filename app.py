import logging

from flask import Flask, render_template

from auth import auth_bp                     # session "current user" context
from catalog import get_all_products
from product_page import format_price
from products import products_bp             # product detail page + checkout action
from stripe_mini import stripe_bp            # checkout-session endpoint + landing pages


# -----------------------------
# App Factory
# -----------------------------
def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object("config")
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # ---- Blueprints ------------------------------------------------------
    for bp in (auth_bp, products_bp, stripe_bp):
        if bp.name not in app.blueprints:
            app.register_blueprint(bp)
    # ----------------------------------------------------------------------

    @app.template_filter("price")
    def price_filter(amount):
        return format_price(amount, app.config.get("CURRENCY", "jpy"))

    # Quick health endpoint
    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    # -----------------------------
    # Home / catalog
    # -----------------------------
    @app.route("/")
    def index():
        return render_template("index.html", products=get_all_products())

    return app


# -----------------------------
# Dev Entrypoint
# -----------------------------
if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config.get("DEBUG", True), threaded=True)
