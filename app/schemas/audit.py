"""
Schémas Pydantic du journal d'audit
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

ActionAudit = Literal[
    "CREATE",
    "UPDATE",
    "DELETE",
    "GENERATE",
    "LOGIN",
    "LOGOUT",
    "AUTH_FAILED",
    "DELETE_DATA",
]
ModuleAudit = Literal["compte", "referentiel", "potager", "verger", "elevage", "comptabilite"]


# schema de sortie, module et email de l'auteur sont deduits
class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int]
    user_email: Optional[str] = None
    action: str
    resource_type: str
    module: Optional[ModuleAudit] = None
    resource_id: Optional[str]
    details: Optional[dict[str, Any]]
    ip_address: Optional[str]
    created_at: datetime
