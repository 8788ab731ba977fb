from datetime import datetime, timezone
from smartprep import db, login_manager
from flask_login import UserMixin


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


class User(db.Model, UserMixin):
    id         = db.Column(db.Integer, primary_key=True)
    username   = db.Column(db.String(40), unique=True, nullable=False)
    role       = db.Column(db.String(20), nullable=False, default='student')
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {"username": self.username, "role": self.role}

    def __repr__(self):
        return f"User('{self.username}', '{self.role}')"


class Preference(db.Model):
    """Small key/value store for values that outlive a login session (the streak pair)."""
    __tablename__ = 'preference'
    key   = db.Column(db.String(60), primary_key=True)
    value = db.Column(db.String(120), nullable=False, default='')

    def __repr__(self):
        return f"Preference({self.key}={self.value!r})"
