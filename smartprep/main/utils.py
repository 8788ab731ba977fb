from flask import jsonify, redirect, request, url_for

from smartprep.state import View

# Endpoint that renders each view.
VIEW_ENDPOINTS = {
    View.LOGIN:             'users.login',
    View.DASHBOARD:         'main.dashboard',
    View.TOPIC_SELECTION:   'main.topics',
    View.ASSESSMENT:        'assessment.index',
    View.FULL_ASSESSMENT:   'assessment.full_index',
    View.ASSESSMENT_RESULT: 'main.result',
    View.ROADMAP:           'roadmap.index',
    View.TIMETABLE:         'roadmap.timetable',
}


def view_url(view: View) -> str:
    return url_for(VIEW_ENDPOINTS[view])


def respond(ctx, **payload):
    """JSON callers get the resulting view (plus payload); form posts are redirected to it."""
    if request.is_json:
        return jsonify({"view": ctx.state.view.value, **payload})
    return redirect(view_url(ctx.state.view))


def json_body() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()
