"""
Calculs monétaires (centimes entiers côté Stripe/Shippo, unités décimales côté commandes).
- Arrondi "half-up" (équivalent Math.round pour des montants positifs), jamais l'arrondi bancaire de round().
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Optional, Tuple, Union

from hearty_hounds import config

Number = Union[int, float, str, Decimal]

def _dec(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value if value is not None else 0))
    except InvalidOperation:
        return Decimal(0)

def round_half_up(value: Number) -> int:
    return int(_dec(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def to_cents(amount: Number) -> int:
    """9.99 -> 999 (le prix décimal passe par str() pour éviter 998.9999...)."""
    return round_half_up(_dec(amount) * 100)

def from_cents(cents: Any) -> float:
    return float(_dec(cents or 0) / 100)

def platform_fee_cents(total_cents: int, rate: Optional[float] = None) -> int:
    rate = config.PLATFORM_FEE_RATE if rate is None else rate
    return round_half_up(_dec(total_cents) * _dec(rate))

def estimate_stripe_fee_cents(total_cents: int, percent: Optional[float] = None, fixed_cents: Optional[int] = None) -> int:
    """
    Estimation des frais Stripe (pas le montant réel facturé): total * 2.9% + 30c par défaut.
    Paramétrable via STRIPE_FEE_PERCENT / STRIPE_FEE_FIXED_CENTS.
    """
    percent = config.STRIPE_FEE_PERCENT if percent is None else percent
    fixed_cents = config.STRIPE_FEE_FIXED_CENTS if fixed_cents is None else fixed_cents
    return round_half_up(_dec(total_cents) * _dec(percent) + _dec(fixed_cents))

def order_total(lines: Iterable[Tuple[Any, Any]]) -> float:
    """Σ prix * quantité en unités décimales (Decimal pour que 50.00 reste 50.00)."""
    total = sum((_dec(price) * _dec(qty) for price, qty in lines), Decimal(0))
    return float(total)
