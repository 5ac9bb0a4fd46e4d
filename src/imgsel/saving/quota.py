"""Upload quota resolution."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Optional

from imgsel.config.models import LimitSettings
from imgsel.errors import QuotaDenied
from imgsel.session import Identity

LOGGER = logging.getLogger(__name__)

DEFAULT_RULE_ID = "default"
BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class QuotaRule:
    """A size ceiling keyed by user or group id."""

    scope: Literal["user", "group"]
    id: str
    size_limit_mb: Any


@dataclass(frozen=True)
class QuotaDecision:
    """Resolved upload allowance for one identity."""

    limit_mb: float
    source: str

    @property
    def allowed(self) -> bool:
        return self.limit_mb > 0

    @property
    def limit_bytes(self) -> float:
        return self.limit_mb * BYTES_PER_MB

    def exceeds(self, size_bytes: int) -> bool:
        """Return True when ``size_bytes`` is strictly above the threshold."""
        return size_bytes > self.limit_bytes


def coerce_limit(value: Any) -> float:
    """Return ``value`` as a non-negative number; anything invalid becomes 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or value < 0:
        return 0.0
    return float(value)


def _table(rules: Iterable[QuotaRule]) -> dict[str, Any]:
    table: dict[str, Any] = {}
    for rule in rules:
        table[rule.id] = rule.size_limit_mb
    return table


def resolve_limit(
    user_id: str,
    group_id: Optional[str],
    user_rules: Iterable[QuotaRule],
    group_rules: Iterable[QuotaRule],
) -> QuotaDecision:
    """Pick the effective limit for an identity.

    Precedence, first match wins: the user's own row, the group's own row,
    the group ``default`` row, the user ``default`` row, then zero. Group rows
    only apply when a group id is present. Later rows with a repeated id
    replace earlier ones.

    Args:
        user_id: Requesting user.
        group_id: Group the request came from, if any.
        user_rules: Rows of the user table.
        group_rules: Rows of the group table.

    Returns:
        QuotaDecision: Limit in megabytes and the row that produced it.
    """
    users = _table(user_rules)
    groups = _table(group_rules)

    candidates: list[tuple[str, Any]] = []
    if user_id in users:
        candidates.append((f"user:{user_id}", users[user_id]))
    if group_id:
        if group_id in groups:
            candidates.append((f"group:{group_id}", groups[group_id]))
        if DEFAULT_RULE_ID in groups:
            candidates.append((f"group:{DEFAULT_RULE_ID}", groups[DEFAULT_RULE_ID]))
    if DEFAULT_RULE_ID in users:
        candidates.append((f"user:{DEFAULT_RULE_ID}", users[DEFAULT_RULE_ID]))

    if not candidates:
        return QuotaDecision(limit_mb=0.0, source="none")
    source, raw = candidates[0]
    return QuotaDecision(limit_mb=coerce_limit(raw), source=source)


def resolve_limit_mb(
    user_id: str,
    group_id: Optional[str],
    user_rules: Iterable[QuotaRule],
    group_rules: Iterable[QuotaRule],
) -> float:
    """Return just the limit in megabytes; see :func:`resolve_limit`."""
    return resolve_limit(user_id, group_id, user_rules, group_rules).limit_mb


class QuotaResolver:
    """Resolve upload allowances from configured limit tables."""

    def __init__(self, user_rules: Iterable[QuotaRule], group_rules: Iterable[QuotaRule]) -> None:
        self.user_rules = tuple(user_rules)
        self.group_rules = tuple(group_rules)

    @classmethod
    def from_settings(cls, limits: LimitSettings) -> QuotaResolver:
        return cls(
            [QuotaRule("user", row.user_id, row.size_limit_mb) for row in limits.users],
            [QuotaRule("group", row.group_id, row.size_limit_mb) for row in limits.groups],
        )

    def resolve(self, identity: Identity) -> QuotaDecision:
        decision = resolve_limit(
            identity.user_id, identity.group_id, self.user_rules, self.group_rules
        )
        LOGGER.debug(
            "Upload limit for user %s (group %s): %sMB from %s",
            identity.user_id,
            identity.group_id,
            decision.limit_mb,
            decision.source,
        )
        return decision

    def require(self, identity: Identity) -> QuotaDecision:
        """Resolve the allowance, raising when uploads are not permitted.

        Raises:
            QuotaDenied: If the resolved limit is zero.
        """
        decision = self.resolve(identity)
        if not decision.allowed:
            raise QuotaDenied(identity.user_id)
        return decision


__all__ = [
    "BYTES_PER_MB",
    "DEFAULT_RULE_ID",
    "QuotaDecision",
    "QuotaResolver",
    "QuotaRule",
    "coerce_limit",
    "resolve_limit",
    "resolve_limit_mb",
]
