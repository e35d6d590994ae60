import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///hackclock.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Length of the shared countdown (milliseconds). 24h by default.
    TIMER_DURATION_MS = int(os.environ.get('TIMER_DURATION_MS', str(24 * 60 * 60 * 1000)))
    # Pre-countdown shown before the timer starts: 5, 4, 3, 2, 1
    PRE_COUNTDOWN_FROM = int(os.environ.get('PRE_COUNTDOWN_FROM', '5'))
    PRE_COUNTDOWN_INTERVAL_SEC = float(os.environ.get('PRE_COUNTDOWN_INTERVAL_SEC', '1.0'))
    # Comma-separated list of allowed origins, or "*"
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
