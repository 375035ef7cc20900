"""
Feature 'orders': réconciliation paiement -> commande, consultation et suivi de statut.
"""
from .service import create_order_from_payment, get_order, list_orders, update_order_status

__all__ = ["create_order_from_payment", "get_order", "list_orders", "update_order_status"]
