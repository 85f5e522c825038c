# =============================================================================
# Django Project Configuration Package
# =============================================================================
# Settings, URLs, ASGI/WSGI entry points and the Celery application that
# runs the scheduled subscription sweeps.
#
# The Celery app is imported here so that it is loaded when Django starts
# and shared tasks bind to it.
# =============================================================================

from config.celery import app as celery_app

__all__ = ("celery_app",)
