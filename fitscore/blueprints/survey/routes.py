from flask import abort, current_app, flash, redirect, render_template, request, session, url_for
from . import bp
from .forms import STEPS
from ...extensions import db, rq
from ...jobs.processing import send_candidate_notification
from ...models.evaluation import Evaluation
from ...services import repository
from ...services.scoring import Answers, InvalidInput

SESSION_KEY = "survey"
LAST_RESULT_KEY = "survey_result_id"


def _answers_so_far():
    return dict(session.get(SESSION_KEY) or {})


def _first_incomplete_step(data):
    for i, (_, _, _, fields) in enumerate(STEPS):
        if any(data.get(f) in (None, "") for f in fields):
            return i
    return len(STEPS) - 1


def _create_evaluation(data):
    answers = Answers.from_mapping(data)
    ev = Evaluation.from_answers(data["candidate_name"], data["candidate_email"], answers)
    db.session.add(ev)
    db.session.commit()
    current_app.logger.info("Evaluation %s created: score=%s %s", ev.id, ev.fit_score, ev.fit_classification)
    return ev


@bp.get("")
@bp.get("/")
def start():
    return redirect(url_for("survey.step", step=0))


@bp.route("/<int:step>", methods=["GET", "POST"])
def step(step):
    if step < 0 or step >= len(STEPS):
        abort(404)
    data = _answers_so_far()
    allowed = _first_incomplete_step(data)
    if step > allowed:
        return redirect(url_for("survey.step", step=allowed))

    title, description, form_cls, fields = STEPS[step]

    if request.method == "POST" and request.form.get("back") and step > 0:
        return redirect(url_for("survey.step", step=step - 1))

    if request.method == "GET":
        form = form_cls(data={f: data[f] for f in fields if f in data})
    else:
        form = form_cls()

    if form.validate_on_submit():
        for f in fields:
            value = form[f].data
            data[f] = value.strip() if isinstance(value, str) else value
        session[SESSION_KEY] = data

        if step < len(STEPS) - 1:
            return redirect(url_for("survey.step", step=step + 1))

        try:
            ev = _create_evaluation(data)
        except InvalidInput as e:
            current_app.logger.warning("Rejected questionnaire: %s", e)
            flash("Respostas inválidas, revise o questionário", "danger")
            return redirect(url_for("survey.step", step=0))

        session.pop(SESSION_KEY, None)
        session[LAST_RESULT_KEY] = ev.id
        rq.enqueue(send_candidate_notification, ev.id)
        return redirect(url_for("survey.result", evaluation_id=ev.id))

    return render_template(
        "survey/step.html",
        form=form,
        fields=fields,
        steps=STEPS,
        current=step,
        title=title,
        description=description,
        progress=int(step * 100 / len(STEPS)),
    )


@bp.get("/resultado/<int:evaluation_id>")
def result(evaluation_id):
    # only the candidate who just submitted may see the result
    if session.get(LAST_RESULT_KEY) != evaluation_id:
        abort(404)
    ev = repository.get_evaluation(db.session, evaluation_id)
    if ev is None:
        abort(404)
    return render_template("survey/result.html", evaluation=ev)
