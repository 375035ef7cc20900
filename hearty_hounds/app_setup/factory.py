"""
Factory d'application pour les entrypoints (hearty_hounds.asgi, tests).
"""
from fastapi import FastAPI

from .exception_handlers import register_exception_handlers
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares (session, CORS, hôtes, en-têtes de sécurité)
      - gestionnaires d'exceptions
      - routers API v1 et health
    """
    app = FastAPI(title="Hearty Hounds API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
