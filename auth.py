# auth.py
import logging

from flask import Blueprint, session, redirect, url_for, flash, render_template, request

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def get_current_user():
    """Return the signed-in user dict, or None when nobody is signed in."""
    user = session.get("user")
    if not isinstance(user, dict) or not user.get("email"):
        return None
    return user


def _safe_next(target):
    # Only follow local paths, never another host
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return url_for("index")


@auth_bp.app_context_processor
def inject_current_user():
    return {"current_user": get_current_user()}


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """
    Demo sign-in: stores the submitted email in the session. There is no
    password check, the real identity provider sits outside this app.
    """
    next_url = request.values.get("redirect") or ""

    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        if not email or "@" not in email:
            flash("Please enter a valid email address.", "warning")
            return render_template("login.html", redirect_to=next_url, form=request.form), 400

        session["user"] = {"email": email}
        session.modified = True
        logger.info("User %s signed in", email)
        flash("Signed in.", "success")
        return redirect(_safe_next(next_url))

    return render_template("login.html", redirect_to=next_url, form={})


@auth_bp.post("/logout")
def logout():
    session.pop("user", None)
    session.modified = True
    flash("Signed out.", "info")
    return redirect(url_for("index"))
