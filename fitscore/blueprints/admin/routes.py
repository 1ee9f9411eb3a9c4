from urllib.parse import urlencode

from flask import abort, current_app, render_template, request
from flask_login import login_required

from . import bp
from ...extensions import db
from ...models.evaluation import Evaluation
from ...services import repository
from ...services.insights import aggregate_insights, classification_counts
from ...services.scoring import Classification, display_scores
from ...utils.decorators import admin_required


@bp.get("")
@login_required
@admin_required
def dashboard():
    q = (request.args.get("q") or "").strip()
    classification = request.args.get("classification") or "all"
    if classification != "all" and classification not in Classification.labels():
        classification = "all"

    # stat cards always cover every evaluation, filters only narrow the table
    stats = classification_counts(repository.list_evaluations(db.session))

    page = request.args.get("page", default=1, type=int)
    per_page = request.args.get("per_page", default=current_app.config.get("EVALUATIONS_PER_PAGE", 20), type=int)
    pagination = db.paginate(repository.evaluations_query(q, classification),
                             page=page, per_page=per_page, error_out=False)

    def make_page_url(target_page: int):
        params = request.args.to_dict()
        params['page'] = target_page
        params['per_page'] = pagination.per_page
        return request.path + '?' + urlencode(params)

    return render_template(
        "admin/dashboard.html",
        items=pagination.items,
        pagination=pagination,
        stats=stats,
        labels=Classification.labels(),
        filters={"q": q, "classification": classification},
        make_page_url=make_page_url,
    )


@bp.get("/evaluations/<int:evaluation_id>")
@login_required
@admin_required
def detail(evaluation_id):
    ev = db.session.get(Evaluation, evaluation_id)
    if ev is None:
        abort(404)
    logs = repository.recent_notification_logs(db.session, evaluation_id=ev.id, limit=50)
    return render_template("admin/detail.html", evaluation=ev, scores=display_scores(ev.answers()), logs=logs)


@bp.get("/analytics")
@login_required
@admin_required
def analytics():
    snapshot = aggregate_insights(repository.list_evaluations(db.session))
    return render_template("admin/analytics.html", snapshot=snapshot)
