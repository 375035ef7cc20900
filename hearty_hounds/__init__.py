"""
Hearty Hounds: API de la boutique (Stripe Checkout, devis Shippo, commandes, panier).
"""
__version__ = "1.0.0"
