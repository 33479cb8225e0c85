from __future__ import annotations

from typing import Protocol, Sequence

from .model import Boundary


class BoundaryRepository(Protocol):
    """Read side of the administrator-managed boundary configuration."""

    def list_active_boundaries(self, organization_id: int) -> Sequence[Boundary]:
        """Active boundaries of an organization in their stable evaluation order."""

        raise NotImplementedError
