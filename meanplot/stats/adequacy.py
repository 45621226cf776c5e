from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GroupAdequacy:
    n: int
    adequate: bool
    reason: str


def evaluate_group_adequacy(n: int, *, min_group_n: int) -> GroupAdequacy:
    # A sample standard deviation needs at least two observations.
    threshold = max(int(min_group_n), 2)
    reasons = []
    if int(n) < threshold:
        reasons.append(f"n<{threshold}")
    return GroupAdequacy(n=int(n), adequate=(len(reasons) == 0), reason=";".join(reasons))
