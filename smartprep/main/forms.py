from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length


class CustomTopicForm(FlaskForm):
    topic = StringField('Or type your own topic',
                        validators=[DataRequired(), Length(max=80)])
    submit = SubmitField('Start Assessment')
