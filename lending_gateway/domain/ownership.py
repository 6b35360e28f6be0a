"""Owner identity checks shared by the engines"""

from lending_gateway.domain.exceptions import UnauthenticatedError


def require_owner(owner_id: str | None) -> str:
    """Return the owner id, or raise if the caller has no identity"""
    if owner_id is None or not str(owner_id).strip():
        raise UnauthenticatedError("User not authenticated")
    return str(owner_id)
