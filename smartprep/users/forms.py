from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    # Any username is accepted; the password is collected but not checked.
    username = StringField('Username',
                           validators=[DataRequired(), Length(min=1, max=40)])
    password = PasswordField('Password')
    submit = SubmitField('Login')
