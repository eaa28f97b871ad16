from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Integer, cast

from fungame import db
from fungame.models import Comment, User, isoformat

LEADERBOARD_TYPES = ('daily', 'weekly', 'all_time')
DEFAULT_LIMIT = 100


def window_start(leaderboard_type: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Earliest entry timestamp (naive UTC) included in the given window."""
    if leaderboard_type == 'all_time':
        return None
    now = now or datetime.now(timezone.utc)
    midnight = datetime.combine(now.date(), time.min)
    if leaderboard_type == 'daily':
        return midnight
    if leaderboard_type == 'weekly':
        return midnight - timedelta(days=7)
    raise ValueError(f"unknown leaderboard type: {leaderboard_type}")


def get_leaderboard(leaderboard_type: str = 'all_time', limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
    """Top scores from the comment log, highest first."""
    since = window_start(leaderboard_type)
    score = cast(Comment.content, Integer)
    query = (
        db.session.query(User.id, User.username, score.label('score'), Comment.created_at)
        .select_from(Comment)
        .join(User, Comment.user_id == User.id)
        .filter(Comment.content.regexp_match('^[0-9]+$'))
    )
    if since is not None:
        query = query.filter(Comment.created_at >= since)
    rows = query.order_by(score.desc(), Comment.created_at.asc()).limit(limit).all()
    return [
        {
            'user_id': str(row.id),
            'username': row.username,
            'score': int(row.score),
            'timestamp': isoformat(row.created_at),
        }
        for row in rows
    ]


def record_score(user_id: int, game_id: int, score: int) -> Comment:
    """Append a leaderboard entry; the caller commits."""
    entry = Comment(user_id=user_id, post_id=game_id, content=str(int(score)))
    db.session.add(entry)
    return entry
