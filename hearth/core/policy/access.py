from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from hearth.core.policy.models import AccessDecision
from hearth.core.privacy.models import AccessLevel, PrivacyPolicy


ROLE_ADMIN = "admin"
ROLE_MODERATOR = "moderator"

# None means "any role". Unknown access levels never reach here: the policy
# model already normalized them to RESTRICTED.
ALLOWED_ROLES: Dict[AccessLevel, Optional[FrozenSet[str]]] = {
    AccessLevel.PUBLIC: None,
    AccessLevel.PRIVATE: frozenset({ROLE_ADMIN, ROLE_MODERATOR}),
    AccessLevel.RESTRICTED: frozenset({ROLE_ADMIN}),
}

_REASONS = {
    AccessLevel.PUBLIC: "Public record.",
    AccessLevel.PRIVATE: "Private records are limited to admins and moderators.",
    AccessLevel.RESTRICTED: "Restricted records are limited to admins.",
}


def evaluate_access(role: str, policy: PrivacyPolicy) -> AccessDecision:
    level = policy.access_level
    allowed_roles = ALLOWED_ROLES.get(level, ALLOWED_ROLES[AccessLevel.RESTRICTED])
    role_s = role if isinstance(role, str) else ""
    allowed = allowed_roles is None or role_s in allowed_roles
    return AccessDecision(allowed=allowed, role=role_s, access_level=level, reason=_REASONS.get(level, ""))


def check_access(role: str, policy: PrivacyPolicy) -> bool:
    return evaluate_access(role, policy).allowed
