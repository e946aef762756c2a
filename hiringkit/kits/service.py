"""
Cas d'usage 'kits': lecture contrôlée et mise à jour partielle des données d'intake.
"""
from typing import Any, Dict, List

from hiringkit.auth.principal import Principal
from hiringkit.utils.responses import api_error
from . import repository
from .schemas import validate_intake

def merge_intake(existing: Dict[str, Any] | None, field_updates: Dict[str, Any]) -> Dict[str, Any]:
    """Fusion superficielle: les nouvelles clés écrasent les anciennes au premier niveau uniquement."""
    base = existing if isinstance(existing, dict) else {}
    return {**base, **field_updates}

def get_kit(kit_id: str, principal: Principal) -> dict:
    kit = repository.get_accessible_kit(kit_id, principal)
    if not kit:
        raise api_error(404, "KIT_NOT_FOUND", "Kit introuvable ou accès refusé")
    return kit

def apply_intake_patch(kit_id: str, field_updates: Dict[str, Any], principal: Principal) -> Dict[str, Any]:
    """
    Applique une mise à jour partielle de l'intake d'un kit.
    Étapes:
      1) Rejette une mise à jour vide (400 NO_UPDATES) avant tout accès BD
      2) Charge le kit via le contrôle d'accès (404 KIT_NOT_FOUND)
      3) Fusionne au premier niveau puis revalide le résultat en mode partiel (400 VALIDATION_ERROR)
      4) Persiste intake_json + edited_at (500 DATABASE_ERROR)
    Retour: {"intake_data": ..., "updated_fields": [...]}
    """
    if not field_updates:
        raise api_error(400, "NO_UPDATES", "Aucune mise à jour fournie")

    kit = get_kit(kit_id, principal)

    merged = merge_intake(kit.get("intake_json"), field_updates)
    result = validate_intake(merged, partial=True)
    if not result.ok:
        raise api_error(400, "VALIDATION_ERROR", "Données d'intake invalides après fusion", result.errors)

    updated = repository.update_intake(kit_id, merged)
    if updated is None:
        raise api_error(500, "DATABASE_ERROR", "Échec de la mise à jour du kit")

    updated_fields: List[str] = list(field_updates.keys())
    return {"intake_data": updated.get("intake_json", merged), "updated_fields": updated_fields}
