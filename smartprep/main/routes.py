from flask import Blueprint, abort, redirect, render_template
from flask_login import login_required

from smartprep import state as st
from smartprep.main.forms import CustomTopicForm
from smartprep.main.utils import json_body, respond, view_url
from smartprep.roadmap.tracker import readiness_score
from smartprep.sessions import current_context

main = Blueprint('main', __name__)

STAGE_VIEWS = frozenset({st.View.ASSESSMENT, st.View.FULL_ASSESSMENT})


def _wrong_view(ctx, view):
    """Redirect to the active view unless it is `view`."""
    if ctx.state.view != view:
        return redirect(view_url(ctx.state.view))
    return None


@main.route("/")
@main.route("/home")
def home():
    return redirect(view_url(current_context().state.view))


@main.route("/dashboard")
@login_required
def dashboard():
    ctx = current_context()
    wrong = _wrong_view(ctx, st.View.DASHBOARD)
    if wrong:
        return wrong
    s = ctx.state
    return render_template(
        'main/dashboard.html',
        title='Dashboard',
        categories=st.CATEGORIES,
        readiness=readiness_score(s.assessment_result, s.roadmap, s.completed_tasks),
    )


@main.route("/dashboard/category", methods=['POST'])
@login_required
def select_category():
    ctx = current_context()
    category = (json_body().get("category") or "").strip()
    if category not in st.CATEGORIES:
        abort(400)
    ctx.close_stages()
    ctx.dispatch(st.select_category, category)
    return respond(ctx)


@main.route("/topics", methods=['GET', 'POST'])
@login_required
def topics():
    ctx = current_context()
    wrong = _wrong_view(ctx, st.View.TOPIC_SELECTION)
    if wrong:
        return wrong
    form = CustomTopicForm()
    if form.validate_on_submit():
        ctx.close_stages()
        ctx.dispatch(st.select_topic, form.topic.data)
        return respond(ctx)
    return render_template('main/topics.html', title='Choose a Topic',
                           topics=st.SUGGESTED_TOPICS, form=form)


@main.route("/topics/select", methods=['POST'])
@login_required
def select_topic():
    ctx = current_context()
    topic = (json_body().get("topic") or "").strip()
    if not topic:
        abort(400)
    ctx.close_stages()
    ctx.dispatch(st.select_topic, topic)
    return respond(ctx)


@main.route("/navigate/<view_name>", methods=['POST'])
@login_required
def navigate(view_name):
    try:
        view = st.View(view_name.upper())
    except ValueError:
        abort(404)
    if view == st.View.LOGIN:
        abort(400)
    ctx = current_context()
    before = ctx.state.view
    after = ctx.dispatch(st.navigate_to, view).view
    if before in STAGE_VIEWS and after != before:
        ctx.close_stages()
    return respond(ctx)


@main.route("/result")
@login_required
def result():
    ctx = current_context()
    wrong = _wrong_view(ctx, st.View.ASSESSMENT_RESULT)
    if wrong:
        return wrong
    return render_template('main/result.html', title='Assessment Result',
                           result=ctx.state.assessment_result, level=ctx.state.level)


@main.route("/result/continue", methods=['POST'])
@login_required
def proceed_to_roadmap():
    ctx = current_context()
    if ctx.state.view != st.View.ASSESSMENT_RESULT:
        return respond(ctx)
    ctx.close_stages()
    ctx.dispatch(st.proceed_to_roadmap)
    return respond(ctx)
