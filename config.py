import os

from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

# Pick up a local .env in dev
load_dotenv(os.path.join(BASE_DIR, ".env"))

# Dev settings
DEBUG = os.getenv("FLASK_DEBUG", "1") == "1"
TEMPLATES_AUTO_RELOAD = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Demo/dev secret, override in the environment
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-later")

# Absolute origin used for product image URLs sent to Stripe.
# Empty means "use the origin of the current request".
SITE_URL = os.getenv("SITE_URL", "")

# Stripe
STRIPE_PUBLISHABLE_KEY = os.getenv("STRIPE_PUBLISHABLE_KEY", "")
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
CURRENCY = os.getenv("CURRENCY", "jpy")

# Checkout-session endpoint the product page posts to (relative to the site origin)
CHECKOUT_SESSION_URL = os.getenv("CHECKOUT_SESSION_URL", "/api/create-checkout-session")
CHECKOUT_REQUEST_TIMEOUT = float(os.getenv("CHECKOUT_REQUEST_TIMEOUT", "10"))
