"""Top-level package for Django configuration.

Settings modules for each environment plus the WSGI and Celery
entry points of the car booking service.
"""

# Import the Celery application as soon as Django starts so shared tasks
# bind to it.
from .celery import app as celery_app  # noqa: F401
