from flask import render_template, url_for, flash, redirect, Blueprint, current_app
from flask_login import login_user, current_user, logout_user
from smartprep import db
from smartprep import state as st
from smartprep.models import User
from smartprep.main.utils import view_url
from smartprep.sessions import current_context, end_session
from smartprep.users.forms import LoginForm

users = Blueprint('users', __name__)


@users.route("/login", methods=['GET', 'POST'])
def login():
    ctx = current_context()
    if current_user.is_authenticated and ctx.state.user is not None:
        return redirect(url_for('main.home'))
    form = LoginForm()
    if form.validate_on_submit():
        username = form.username.data.strip()
        user = User.query.filter_by(username=username).first()
        if user is None:
            user = User(username=username, role='student')
            db.session.add(user)
            db.session.commit()
            current_app.logger.info("Created user %s", username)
        login_user(user)
        ctx.close_stages()
        ctx.dispatch(st.login, st.UserIdentity(user.username, user.role))
        flash(f'Welcome, {user.username}!', 'success')
        return redirect(view_url(ctx.state.view))
    return render_template('users/login.html', title='Login', form=form)


@users.route("/logout", methods=['GET', 'POST'])
def logout():
    current_context().dispatch(st.logout)
    end_session()
    logout_user()
    return redirect(url_for('users.login'))
