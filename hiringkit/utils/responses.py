"""
Erreurs d'API normalisées.
Toutes les erreurs exposées aux clients ont la forme:
  {"success": false, "error": {"code": "...", "message": "...", "details": [...]}}
Les vues lèvent api_error(...) (une HTTPException dont detail porte {code, message});
le rendu final est fait par hiringkit.app_setup.exceptions.
"""
from typing import Any, Dict, List
from fastapi import HTTPException

def error_body(code: str, message: str, details: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}

def api_error(status_code: int, code: str, message: str, details: Any = None) -> HTTPException:
    detail: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        detail["details"] = details
    return HTTPException(status_code=status_code, detail=detail)

def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Aplatit les erreurs pydantic en [{path, message, code}] (sans l'input fautif)."""
    details: List[Dict[str, str]] = []
    for err in errors or []:
        loc = [str(p) for p in (err.get("loc") or ()) if p not in ("body",)]
        details.append({
            "path": ".".join(loc),
            "message": str(err.get("msg") or ""),
            "code": str(err.get("type") or ""),
        })
    return details

