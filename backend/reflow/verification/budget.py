"""Budget verification for reflowed itineraries."""

from collections.abc import Sequence

from backend.reflow.errors import BudgetExceeded
from backend.reflow.models.change_set import BudgetConstraints
from backend.reflow.models.itinerary import Day, Itinerary
from backend.reflow.models.violations import Violation, ViolationKind, ViolationSeverity


def _money(amount: float) -> float:
    """Round to cents so float sums compare cleanly."""
    return round(amount, 2)


def verify_budget(days: Sequence[Day], constraints: BudgetConstraints | None) -> list[Violation]:
    """Check total and per-category spend against caller ceilings.

    Args:
        days: All days of the itinerary
        constraints: Optional ceilings; None means nothing to check

    Returns:
        List of BLOCKING violations, total ceiling first (empty if within budget)
    """
    if constraints is None:
        return []

    violations: list[Violation] = []

    total = 0.0
    category_totals: dict[str, float] = {}
    activity_ids_by_category: dict[str, list[str]] = {}
    cost_bearing_ids: list[str] = []

    for day in days:
        for activity in day.activities:
            cost = activity.cost_estimate or 0.0
            total += cost
            category_totals[activity.category] = category_totals.get(activity.category, 0.0) + cost
            if cost > 0:
                cost_bearing_ids.append(activity.id)
                activity_ids_by_category.setdefault(activity.category, []).append(activity.id)

    total = _money(total)

    # Case 1: total ceiling
    if constraints.max_total is not None and total > constraints.max_total:
        overage = _money(total - constraints.max_total)
        violations.append(
            Violation(
                kind=ViolationKind.BUDGET,
                code="OVER_BUDGET_TOTAL",
                message="Total itinerary cost exceeds the maximum budget.",
                severity=ViolationSeverity.BLOCKING,
                affected_activity_ids=cost_bearing_ids,
                details={
                    "scope": "total",
                    "limit": constraints.max_total,
                    "actual": total,
                    "overage": overage,
                },
            )
        )

    # Case 2: per-category ceilings, in the order the caller listed them
    for category, limit in (constraints.max_per_category or {}).items():
        actual = _money(category_totals.get(category, 0.0))
        if actual <= limit:
            continue
        violations.append(
            Violation(
                kind=ViolationKind.BUDGET,
                code="OVER_BUDGET_CATEGORY",
                message=f"Spend on category '{category}' exceeds its maximum budget.",
                severity=ViolationSeverity.BLOCKING,
                affected_activity_ids=activity_ids_by_category.get(category, []),
                details={
                    "scope": category,
                    "limit": limit,
                    "actual": actual,
                    "overage": _money(actual - limit),
                },
            )
        )

    return violations


def enforce_budget(itinerary: Itinerary, constraints: BudgetConstraints | None) -> None:
    """Raise BudgetExceeded if any ceiling is exceeded.

    The first violation names the reported scope; all violations and the
    attempted itinerary travel with the error.

    Raises:
        BudgetExceeded: If verify_budget reports any violation
    """
    violations = verify_budget(itinerary.days, constraints)
    if not violations:
        return

    first = violations[0]
    raise BudgetExceeded(
        scope=str(first.details["scope"]),
        overage=float(first.details["overage"]),  # type: ignore[arg-type]
        violations=violations,
        attempted=itinerary,
    )
