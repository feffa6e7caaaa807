"""Test settings: in-memory SQLite and eager Celery."""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

BOOKING_ENGINE = {
    'LOCK_TIMEOUT_SECONDS': 5.0,
    'MAX_BOOKING_DAYS': 4,
    'MAX_ADVANCE_MONTHS': 3,
    'MAX_WEEKEND_BOOKINGS_PER_YEAR': 5,
    'CALENDAR_FIRST_WEEKDAY': 6,
}
