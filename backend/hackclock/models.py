from hackclock import db
from datetime import datetime, timezone


class Timer(db.Model):
    """The single shared countdown. At most one row exists at a time."""
    __tablename__ = 'timer'
    id = db.Column(db.Integer, primary_key=True)
    start_time = db.Column(db.DateTime(timezone=True), nullable=True)
    duration = db.Column(db.Integer, nullable=True)  # milliseconds
    is_running = db.Column(db.Boolean, default=False, nullable=False)

    @property
    def start_time_utc(self):
        # SQLite hands back naive datetimes; everything we write is UTC
        if self.start_time is None:
            return None
        if self.start_time.tzinfo is None:
            return self.start_time.replace(tzinfo=timezone.utc)
        return self.start_time.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
