"""
smartprep/assessment/routes.py
──────────────────────────────
Single-topic assessment and the full mock assessment:
  GET  /assessment                     – load (first visit) and render the stage
  GET  /assessment/state               – AJAX: stage snapshot (JSON)
  POST /assessment/answer              – answer the current question
  POST /assessment/run                 – AJAX: simulate running the code
  POST /assessment/reset               – put the starter code back
  POST /assessment/submit              – submit code for grading
  POST /full-assessment/start          – enter the full assessment
  GET  /full-assessment                – load (first visit) and render
  GET  /full-assessment/state          – AJAX: stage snapshot (JSON)
  POST /full-assessment/answer         – answer the current question
  POST /full-assessment/begin-coding   – leave the transition screen
  POST /full-assessment/run            – AJAX: simulate running the code
  POST /full-assessment/reset          – put the starter code back
  POST /full-assessment/evaluate       – grade the code
  POST /full-assessment/skip           – give up on the coding round
"""
from flask import (Blueprint, abort, current_app, jsonify, redirect,
                   render_template)
from flask_login import login_required

from smartprep import state as st
from smartprep.assessment.engine import AssessmentEngine
from smartprep.assessment.full import FullAssessment
from smartprep.main.utils import json_body, respond, view_url
from smartprep.provider import get_provider
from smartprep.sessions import current_context

assessment = Blueprint('assessment', __name__)


# ── helpers ──────────────────────────────────────────────────────────────────

def _completion_handler(ctx, stage_attr, stage):
    """on_complete callback that only applies while `stage` is still the attached one."""
    def _apply(result):
        with ctx.lock:
            if getattr(ctx, stage_attr) is not stage:
                return
            ctx.dispatch(st.complete_assessment, result)
    return _apply


def _option_index(data) -> int:
    try:
        return int(data.get("option"))
    except (TypeError, ValueError):
        abort(400)


def _ensure_engine(ctx) -> AssessmentEngine:
    stale = None
    with ctx.lock:
        engine = ctx.assessment
        if engine is None or engine.topic != ctx.state.selected_topic:
            stale = engine
            engine = AssessmentEngine(
                ctx.state.selected_topic,
                get_provider(),
                duration=current_app.config.get('ASSESSMENT_SECONDS', 20 * 60),
                room=ctx.sid,
            )
            engine.on_complete = _completion_handler(ctx, 'assessment', engine)
            ctx.assessment = engine
            fresh = True
        else:
            fresh = False
    if stale is not None:
        stale.close()
    if fresh:
        current_app.logger.info("Starting %s assessment on %r", engine.mode.value, engine.topic)
        engine.load()
    return engine


def _ensure_full(ctx) -> FullAssessment:
    with ctx.lock:
        full = ctx.full
        fresh = full is None
        if fresh:
            full = FullAssessment(
                get_provider(),
                duration=current_app.config.get('ASSESSMENT_SECONDS', 20 * 60),
                room=ctx.sid,
            )
            full.on_complete = _completion_handler(ctx, 'full', full)
            ctx.full = full
    if fresh:
        current_app.logger.info("Starting full assessment")
        full.load()
    return full


def _stage_or_redirect(ctx, view):
    if ctx.state.view != view:
        return redirect(view_url(ctx.state.view))
    return None


# ── Single-topic assessment ──────────────────────────────────────────────────

@assessment.route('/assessment')
@login_required
def index():
    ctx = current_context()
    wrong = _stage_or_redirect(ctx, st.View.ASSESSMENT)
    if wrong:
        return wrong
    engine = _ensure_engine(ctx)
    if ctx.state.view != st.View.ASSESSMENT:
        return redirect(view_url(ctx.state.view))
    return render_template('assessment/assessment.html', title='Assessment',
                           engine=engine, stage=engine.to_dict())


@assessment.route('/assessment/state')
@login_required
def state():
    ctx = current_context()
    if ctx.assessment is None:
        return jsonify({"view": ctx.state.view.value, "stage": None})
    return jsonify({"view": ctx.state.view.value, "stage": ctx.assessment.to_dict()})


@assessment.route('/assessment/answer', methods=['POST'])
@login_required
def answer():
    ctx = current_context()
    if ctx.assessment is None:
        abort(404)
    accepted = ctx.assessment.answer(_option_index(json_body()))
    return respond(ctx, accepted=accepted, stage=ctx.assessment.to_dict())


@assessment.route('/assessment/run', methods=['POST'])
@login_required
def run_code():
    ctx = current_context()
    if ctx.assessment is None:
        abort(404)
    result = ctx.assessment.run_code(json_body().get("code"))
    if result is None:
        return jsonify({"error": "No coding challenge in progress"}), 409
    return jsonify(result.model_dump())


@assessment.route('/assessment/reset', methods=['POST'])
@login_required
def reset_code():
    ctx = current_context()
    if ctx.assessment is None:
        abort(404)
    accepted = ctx.assessment.reset_code()
    return respond(ctx, accepted=accepted, stage=ctx.assessment.to_dict())


@assessment.route('/assessment/submit', methods=['POST'])
@login_required
def submit():
    ctx = current_context()
    if ctx.assessment is None:
        abort(404)
    result = ctx.assessment.submit(json_body().get("code"))
    return respond(ctx, result=result.model_dump() if result else None)


# ── Full assessment ──────────────────────────────────────────────────────────

@assessment.route('/full-assessment/start', methods=['POST'])
@login_required
def full_start():
    ctx = current_context()
    ctx.close_stages()
    ctx.dispatch(st.start_full_assessment)
    return respond(ctx)


@assessment.route('/full-assessment')
@login_required
def full_index():
    ctx = current_context()
    wrong = _stage_or_redirect(ctx, st.View.FULL_ASSESSMENT)
    if wrong:
        return wrong
    full = _ensure_full(ctx)
    return render_template('assessment/full.html', title='Full Assessment',
                           full=full, stage=full.to_dict())


@assessment.route('/full-assessment/state')
@login_required
def full_state():
    ctx = current_context()
    if ctx.full is None:
        return jsonify({"view": ctx.state.view.value, "stage": None})
    return jsonify({"view": ctx.state.view.value, "stage": ctx.full.to_dict()})


@assessment.route('/full-assessment/answer', methods=['POST'])
@login_required
def full_answer():
    ctx = current_context()
    if ctx.full is None:
        abort(404)
    accepted = ctx.full.answer(_option_index(json_body()))
    return respond(ctx, accepted=accepted, stage=ctx.full.to_dict())


@assessment.route('/full-assessment/begin-coding', methods=['POST'])
@login_required
def full_begin_coding():
    ctx = current_context()
    if ctx.full is None:
        abort(404)
    started = ctx.full.begin_coding()
    return respond(ctx, accepted=started, stage=ctx.full.to_dict())


@assessment.route('/full-assessment/run', methods=['POST'])
@login_required
def full_run():
    ctx = current_context()
    if ctx.full is None:
        abort(404)
    result = ctx.full.run_code(json_body().get("code"))
    if result is None:
        return jsonify({"error": "Coding round not in progress"}), 409
    return jsonify(result.model_dump())


@assessment.route('/full-assessment/reset', methods=['POST'])
@login_required
def full_reset():
    ctx = current_context()
    if ctx.full is None:
        abort(404)
    accepted = ctx.full.reset_code()
    return respond(ctx, accepted=accepted, stage=ctx.full.to_dict())


@assessment.route('/full-assessment/evaluate', methods=['POST'])
@login_required
def full_evaluate():
    ctx = current_context()
    if ctx.full is None:
        abort(404)
    evaluation = ctx.full.evaluate(json_body().get("code"))
    return respond(ctx, evaluation=evaluation.model_dump() if evaluation else None)


@assessment.route('/full-assessment/skip', methods=['POST'])
@login_required
def full_skip():
    ctx = current_context()
    if ctx.full is None:
        abort(404)
    ctx.full.skip_coding()
    return respond(ctx)
