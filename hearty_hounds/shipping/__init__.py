"""
Feature 'shipping': devis Shippo (panier agrégé ou colis explicites) et validation d'adresse.
"""
from .packaging import calculate_package_details
from .service import get_rates, get_rates_for_cart, validate_address

__all__ = ["calculate_package_details", "get_rates", "get_rates_for_cart", "validate_address"]
