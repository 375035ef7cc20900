"""
Feature 'payments': sessions Stripe Checkout (création, consultation).
"""
from .service import create_checkout_session, get_checkout_session

__all__ = ["create_checkout_session", "get_checkout_session"]
