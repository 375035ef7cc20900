"""
Adaptateur Shippo (REST via httpx).
- POST /shipments/ : création d'une expédition et récupération synchrone des tarifs.
- POST /addresses/ : création + validation d'adresse (validate=true).
- Toute réponse non-2xx lève ShippoError avec le champ `detail` renvoyé par Shippo.
"""
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

class ShippoError(Exception):
    """Erreur renvoyée par l'API Shippo (corps {"detail": ...} ou équivalent)."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

def _extract_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"status {resp.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message") or body.get("error")
        if detail:
            return str(detail)
        # Erreurs de validation Shippo: {"field": ["msg", ...]}
        return "; ".join(f"{k}: {v}" for k, v in body.items()) or f"status {resp.status_code}"
    return str(body)

class ShippoClient:
    def __init__(self, api_key: str, base_url: str = "https://api.goshippo.com", timeout: float = 20.0, transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"ShippoToken {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise RuntimeError("SHIPPO_API_KEY manquant")
        resp = self._http.post(path, json=payload)
        if resp.status_code >= 400:
            detail = _extract_detail(resp)
            logger.warning("shippo %s failed status=%s detail=%s", path, resp.status_code, detail)
            raise ShippoError(detail, status_code=resp.status_code)
        return resp.json()

    def create_shipment(self, shipment: Dict[str, Any]) -> Dict[str, Any]:
        """Retour: shipment Shippo (object_id, rates[...])."""
        return self._post("/shipments/", shipment)

    def validate_address(self, address: Dict[str, Any]) -> Dict[str, Any]:
        """Retour: adresse Shippo avec validation_results {is_valid, messages}."""
        return self._post("/addresses/", {**address, "validate": True})

    def close(self) -> None:
        self._http.close()
