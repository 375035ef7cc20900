"""
Taxonomie d'erreurs HTTP partagée par les vues.
- 400 validation: le message nomme le champ manquant/invalide
- 400 fournisseur: type/message du fournisseur (Stripe, Shippo)
- 404 absence de ressource (résultat métier, pas une exception "inattendue")
- 500 interne: message générique, l'exception est loggée par la vue
"""
from typing import Any, Dict, Optional
from fastapi import HTTPException

def error_body(error: str, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body

def bad_request(message: str, error: str = "Validation error", **extra: Any) -> HTTPException:
    return HTTPException(status_code=400, detail=error_body(error, message, **extra))

def not_found(error: str, message: Optional[str] = None) -> HTTPException:
    return HTTPException(status_code=404, detail=error_body(error, message or error))

def internal_error(exc: Optional[Exception] = None) -> HTTPException:
    message = str(exc) if exc is not None and str(exc) else "Unknown error occurred"
    return HTTPException(status_code=500, detail=error_body("Internal server error", message))
