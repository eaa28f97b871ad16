from fungame import db
from flask_login import UserMixin
from datetime import datetime, timezone
import json


def utcnow():
    # Naive UTC, matching the `timestamp without time zone` columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat(timespec='milliseconds') + 'Z' if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    email = db.Column(db.String(100), unique=True, nullable=False, index=True)
    # Stored as submitted; compared directly at login
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    posts = db.relationship('Post', backref='author', lazy='dynamic')
    comments = db.relationship('Comment', backref='author', lazy='dynamic')

    def check_password(self, password):
        return password == self.password_hash

    def to_dict(self):
        return {
            'id': str(self.id),
            'username': self.username,
            'email': self.email,
            'created_at': isoformat(self.created_at),
        }


class Post(db.Model):
    """Generic content row; game sessions keep difficulty in `title` and
    the JSON state in `content`."""
    __tablename__ = 'posts'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    comments = db.relationship('Comment', backref='post', lazy='dynamic')

    @property
    def game_state(self):
        return json.loads(self.content) if self.content else {}

    @game_state.setter
    def game_state(self, state):
        self.content = json.dumps(state)

    def to_game_dict(self):
        state = self.game_state
        return {
            'id': str(self.id),
            'user_id': str(self.user_id),
            'difficulty': state.get('difficulty', self.title),
            'score': state.get('score', 0),
            'time_remaining': state.get('time_remaining', 0),
            'power_ups': state.get('power_ups', []),
            'board': state.get('board'),
            'status': state.get('status'),
            'created_at': isoformat(self.created_at),
        }


class Comment(db.Model):
    """Generic comment row; leaderboard entries keep the score as decimal
    text in `content`."""
    __tablename__ = 'comments'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    post_id = db.Column(db.Integer, db.ForeignKey('posts.id'), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': str(self.id),
            'user_id': str(self.user_id),
            'post_id': str(self.post_id),
            'content': self.content,
            'created_at': isoformat(self.created_at),
        }
