from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Domain entity: the tracked person and the organization whose boundaries apply.

    Accounts are managed elsewhere; this is only the lookup the pipeline needs.
    """

    user_id: int
    organization_id: int
    full_name: str = ""
    is_active: bool = True
