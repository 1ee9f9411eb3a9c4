from flask import abort, current_app, render_template, request, redirect, url_for, flash
from flask_login import login_user, logout_user, login_required, current_user
from . import bp
from ...extensions import db
from .forms import LoginForm, SignupForm
from ...models.user import User


def _safe_next(target):
    # only relative paths, never another host
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return None


@bp.route("/login", methods=["GET", "POST"])
def login():
    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower()).first()
        if user and user.check_password(form.password.data):
            login_user(user)
            current_app.logger.info("User %s logged in", user.id)
            return redirect(_safe_next(request.args.get("next")) or url_for("admin.dashboard"))
        flash("E-mail ou senha inválidos", "danger")
    return render_template("auth/login.html", form=form)

@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return redirect(url_for("auth.login"))

@bp.route("/signup", methods=["GET", "POST"])
def signup():
    """First account: anyone may create it. Afterwards: admins only."""
    form = SignupForm()
    user_exists = User.query.first() is not None
    if user_exists and (not current_user.is_authenticated or current_user.role != "admin"):
        abort(403)

    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        if User.query.filter_by(email=email).first():
            flash("Já existe um usuário com este e-mail", "danger")
        else:
            user = User(email=email, role="admin")
            user.set_password(form.password.data)
            db.session.add(user)
            db.session.commit()
            current_app.logger.info("Admin account %s created", user.id)
            return redirect(url_for("auth.signup_success"))
    return render_template("auth/signup.html", form=form, user_exists=user_exists)

@bp.get("/signup/success")
def signup_success():
    return render_template("auth/signup_success.html")
