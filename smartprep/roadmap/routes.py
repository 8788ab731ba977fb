"""
smartprep/roadmap/routes.py
───────────────────────────
  GET  /roadmap                                – generate once, then render the plan
  POST /roadmap/day/<day>/toggle               – expand / collapse a day
  POST /roadmap/task/<task_id>/toggle          – mark a task done / not done
  POST /roadmap/task/<task_id>/challenge       – open the embedded coding challenge
  POST /roadmap/task/<task_id>/challenge/close – close it
  POST /roadmap/task/<task_id>/challenge/run   – AJAX: simulate running the code
  POST /roadmap/task/<task_id>/challenge/reset – put the starter code back
  POST /roadmap/task/<task_id>/challenge/evaluate – grade; success completes the task
  GET  /timetable                              – seven-day calendar of the plan
"""
from flask import (Blueprint, abort, current_app, jsonify, redirect,
                   render_template)
from flask_login import login_required

from smartprep import state as st
from smartprep.main.utils import json_body, respond, view_url
from smartprep.provider import get_provider
from smartprep.roadmap.tracker import (RoadmapView, all_task_ids, day_completion_pct,
                                       iter_tasks, platform_link, readiness_score,
                                       roadmap_days_for)
from smartprep.roadmap.utils import build_timetable
from smartprep.sessions import current_context

roadmap = Blueprint('roadmap', __name__)


# ── helpers ──────────────────────────────────────────────────────────────────

def _roadmap_view(ctx) -> RoadmapView:
    with ctx.lock:
        if ctx.roadmap_view is None:
            ctx.roadmap_view = RoadmapView(get_provider())
        return ctx.roadmap_view


def _ensure_roadmap(ctx, view: RoadmapView) -> None:
    """Ask the provider for a plan only when none is cached for this session."""
    with ctx.lock:
        if ctx.state.roadmap is not None:
            return
        s = ctx.state
        weak_areas = s.assessment_result.weak_areas if s.assessment_result else []
        days = roadmap_days_for(
            s.selected_topic,
            current_app.config.get('ROADMAP_DAYS', 5),
            current_app.config.get('COMPREHENSIVE_ROADMAP_DAYS', 14),
        )
        current_app.logger.info("Generating %d-day roadmap for %r (%s)",
                                days, s.selected_topic, s.level.value)
        plan = view.generate(s.selected_topic, s.level.value, weak_areas, days)
        if plan is not None:
            ctx.dispatch(st.save_roadmap, plan)


def _require_task(ctx, task_id: str) -> None:
    if ctx.state.roadmap is None or task_id not in all_task_ids(ctx.state.roadmap):
        abort(404)


# ── Roadmap ──────────────────────────────────────────────────────────────────

@roadmap.route('/roadmap')
@login_required
def index():
    ctx = current_context()
    if ctx.state.view != st.View.ROADMAP:
        return redirect(view_url(ctx.state.view))
    view = _roadmap_view(ctx)
    _ensure_roadmap(ctx, view)

    s = ctx.state
    plan = s.roadmap
    return render_template(
        'roadmap/roadmap.html',
        title='Your Roadmap',
        roadmap=plan,
        error=view.error,
        expanded_day=view.expanded_day,
        workspaces=view.workspaces,
        tasks=list(iter_tasks(plan)) if plan else [],
        day_pct={d.day: day_completion_pct(d, s.completed_tasks) for d in plan.days} if plan else {},
        readiness=readiness_score(s.assessment_result, plan, s.completed_tasks),
        platform_link=platform_link,
    )


@roadmap.route('/roadmap/day/<int:day>/toggle', methods=['POST'])
@login_required
def toggle_day(day):
    ctx = current_context()
    expanded = _roadmap_view(ctx).toggle_day(day)
    return respond(ctx, expanded_day=expanded)


@roadmap.route('/roadmap/task/<task_id>/toggle', methods=['POST'])
@login_required
def toggle_task(task_id):
    ctx = current_context()
    _require_task(ctx, task_id)
    s = ctx.dispatch(st.toggle_task, task_id)
    return respond(
        ctx,
        task_id=task_id,
        completed=task_id in s.completed_tasks,
        readiness=readiness_score(s.assessment_result, s.roadmap, s.completed_tasks),
    )


@roadmap.route('/roadmap/task/<task_id>/challenge', methods=['POST'])
@login_required
def open_challenge(task_id):
    ctx = current_context()
    _require_task(ctx, task_id)

    def _complete(tid):
        ctx.dispatch(st.mark_task_complete, tid)

    ws = _roadmap_view(ctx).open_challenge(ctx.state.roadmap, task_id, _complete)
    if ws is None:
        abort(404)
    return respond(ctx, workspace=ws.to_dict())


@roadmap.route('/roadmap/task/<task_id>/challenge/close', methods=['POST'])
@login_required
def close_challenge(task_id):
    ctx = current_context()
    _roadmap_view(ctx).close_challenge(task_id)
    return respond(ctx)


def _open_workspace(ctx, task_id):
    ws = _roadmap_view(ctx).workspaces.get(task_id)
    if ws is None:
        abort(404)
    return ws


@roadmap.route('/roadmap/task/<task_id>/challenge/run', methods=['POST'])
@login_required
def run_challenge(task_id):
    ctx = current_context()
    ws = _open_workspace(ctx, task_id)
    return jsonify(ws.run(json_body().get("code")).model_dump())


@roadmap.route('/roadmap/task/<task_id>/challenge/reset', methods=['POST'])
@login_required
def reset_challenge(task_id):
    ctx = current_context()
    ws = _open_workspace(ctx, task_id)
    ws.reset()
    return respond(ctx, workspace=ws.to_dict())


@roadmap.route('/roadmap/task/<task_id>/challenge/evaluate', methods=['POST'])
@login_required
def evaluate_challenge(task_id):
    ctx = current_context()
    ws = _open_workspace(ctx, task_id)
    evaluation = ws.evaluate(json_body().get("code"))
    return respond(
        ctx,
        evaluation=evaluation.model_dump(),
        completed=task_id in ctx.state.completed_tasks,
    )


# ── Timetable ────────────────────────────────────────────────────────────────

@roadmap.route('/timetable')
@login_required
def timetable():
    ctx = current_context()
    if ctx.state.view != st.View.TIMETABLE or ctx.state.roadmap is None:
        return redirect(view_url(ctx.state.view))
    return render_template('roadmap/timetable.html', title='Timetable',
                           roadmap=ctx.state.roadmap,
                           cells=build_timetable(ctx.state.roadmap),
                           task_id=st.task_id)
