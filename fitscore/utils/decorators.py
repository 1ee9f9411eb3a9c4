from functools import wraps
from flask import abort, jsonify
from flask_login import current_user

def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            abort(401)
        if getattr(current_user, "role", None) != "admin":
            abort(403)
        return view(*args, **kwargs)
    return wrapped


def api_admin_required(view):
    """Same check as ``admin_required`` but answers with JSON errors."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({"error": "Authentication required"}), 401
        if getattr(current_user, "role", None) != "admin":
            return jsonify({"error": "Admin access required"}), 403
        return view(*args, **kwargs)
    return wrapped
