"""
Dépendance de pagination pour les endpoints de liste
"""

import math
from dataclasses import dataclass
from typing import Any, Sequence

from fastapi import Query

from app.schemas.pagination import PaginatedResponse


@dataclass
class PaginationParams:
    """Paramètres de pagination extraits des query params"""

    page: int = Query(default=1, ge=1, description="Numéro de page")
    per_page: int = Query(default=50, ge=1, le=100, description="Éléments par page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page

    def response(self, items: Sequence[Any], total: int) -> PaginatedResponse:
        """Enveloppe une page de résultats"""
        return PaginatedResponse(
            items=list(items),
            total=total,
            page=self.page,
            per_page=self.per_page,
            pages=math.ceil(total / self.per_page) if total else 0,
        )
