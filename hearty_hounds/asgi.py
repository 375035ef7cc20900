"""
ASGI entrypoint: expose `app` pour les process managers (uvicorn, gunicorn -k uvicorn.workers.UvicornWorker).
Toute la configuration FastAPI est centralisée dans hearty_hounds.app_setup.
"""

from hearty_hounds.app import app

__all__ = ["app"]
