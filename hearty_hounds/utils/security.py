from typing import Any, Dict, Optional
import logging

from fastapi import Depends, HTTPException, Request

from hearty_hounds import config
from hearty_hounds.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

def determine_role(email: Optional[str], metadata: Optional[Dict[str, Any]]) -> str:
    """
    Rôle applicatif: "admin" si user_metadata.role == admin ou si l'email figure dans ADMIN_EMAILS.
    """
    if str((metadata or {}).get("role", "")).lower() == "admin":
        return "admin"
    if email and email.lower() in config.ADMIN_EMAILS:
        return "admin"
    return "user"

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Vérifie le jeton via supabase.auth.get_user et normalise {id, email, user_metadata}."""
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user

def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None

def get_current_user(request: Request) -> Dict[str, Any]:
    token = _bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        raw = get_user_from_access_token(token)
    except Exception:
        logger.info("Invalid or expired access token")
        raise HTTPException(status_code=401, detail="Session expired, please sign in again")
    if not raw.get("id"):
        raise HTTPException(status_code=401, detail="Session expired, please sign in again")
    email = raw.get("email")
    metadata = raw.get("user_metadata") or {}
    return {"id": raw.get("id"), "email": email, "metadata": metadata, "role": determine_role(email, metadata)}

def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """Utilisateur courant si un Bearer valide est fourni, None sinon (routes publiques)."""
    if not _bearer_token(request):
        return None
    return get_current_user(request)

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
