"""
Appelant d'une requête: soit un invité (Guest), soit un utilisateur authentifié (Authenticated).
Toutes les vues reçoivent un Principal via hiringkit.utils.security.get_principal et
branchent sur son type plutôt que sur un « user » éventuellement None.
"""
from typing import Optional, Union

class Guest:
    """Aucun utilisateur authentifié (pas de token ou token invalide)."""

    is_authenticated = False
    is_admin = False
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    org_id: Optional[str] = None

    def __eq__(self, other):
        return isinstance(other, Guest)

    def __hash__(self):
        return hash("guest")

    def __repr__(self):
        return "Guest()"

class Authenticated:
    """Utilisateur authentifié (id, email, role, org_id issus de Supabase Auth + table users)."""

    is_authenticated = True

    def __init__(self, user_id: str, email: Optional[str] = None, role: str = "user", org_id: Optional[str] = None):
        if not user_id:
            raise ValueError("user_id is required")
        self.user_id = str(user_id)
        self.email = email
        self.role = role or "user"
        self.org_id = org_id

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __eq__(self, other):
        return (
            isinstance(other, Authenticated)
            and (self.user_id, self.email, self.role, self.org_id) == (other.user_id, other.email, other.role, other.org_id)
        )

    def __hash__(self):
        return hash((self.user_id, self.role))

    def __repr__(self):
        return f"Authenticated(user_id={self.user_id!r}, role={self.role!r}, org_id={self.org_id!r})"

Principal = Union[Guest, Authenticated]

GUEST = Guest()
