"""Day-level route ordering around locked anchors.

Heuristics only: nearest-neighbor when nothing is locked, cheapest insertion
around anchors otherwise. Both are O(n^2) in the number of stops per day,
plus one feasibility check per candidate position when one is supplied.
"""

from collections.abc import Callable, Collection

from backend.reflow.models.itinerary import Activity
from backend.reflow.planning.geo import distance_km

# Insertion costs closer than this (1 mm) are treated as ties
TIE_EPSILON_KM = 1e-6

# Decides whether a candidate day order can be scheduled without
# running unlocked stops into a later anchor
Feasibility = Callable[[list[Activity]], bool]


def _dist(a: Activity, b: Activity) -> float:
    return distance_km(a.place.coordinate, b.place.coordinate)


def insertion_cost(sequence: list[Activity], candidate: Activity, position: int) -> float:
    """Added travel distance from inserting candidate before sequence[position].

    Missing neighbours at either end contribute nothing.
    """
    prev = sequence[position - 1] if position > 0 else None
    nxt = sequence[position] if position < len(sequence) else None

    cost = 0.0
    if prev is not None:
        cost += _dist(prev, candidate)
    if nxt is not None:
        cost += _dist(candidate, nxt)
    if prev is not None and nxt is not None:
        cost -= _dist(prev, nxt)
    return cost


def order_nearest_neighbor(activities: list[Activity]) -> list[Activity]:
    """Greedy tour starting from the first activity.

    Ties go to the activity appearing earlier in the input.
    """
    if len(activities) <= 2:
        return list(activities)

    ordered = [activities[0]]
    remaining = list(activities[1:])

    while remaining:
        current = ordered[-1]
        nearest_index = 0
        min_distance = float("inf")
        for i, candidate in enumerate(remaining):
            d = _dist(current, candidate)
            if d < min_distance:
                min_distance = d
                nearest_index = i
        ordered.append(remaining.pop(nearest_index))

    return ordered


def insert_around_anchors(
    anchors: list[Activity],
    unlocked: list[Activity],
    input_order: dict[str, int],
    feasible: Feasibility | None = None,
) -> list[Activity]:
    """Insert unlocked activities one by one at their cheapest position.

    Anchors keep their relative order. Each insertion considers the sequence
    built so far, so later activities can land next to earlier insertions.
    Among equal-cost positions the one closest to the activity's place in
    the input order wins.

    When ``feasible`` is given, positions it rejects are skipped. Appending
    after the last stop never moves an earlier stop, so it stays available
    as long as the sequence built so far is feasible.
    """
    sequence = list(anchors)

    for activity in unlocked:
        rank = input_order[activity.id]
        natural = sum(1 for a in sequence if input_order[a.id] < rank)

        best_position = len(sequence)
        best_cost = float("inf")
        best_displacement = len(sequence) + 1
        for position in range(len(sequence) + 1):
            cost = insertion_cost(sequence, activity, position)
            displacement = abs(position - natural)
            if not (
                cost < best_cost - TIE_EPSILON_KM
                or (abs(cost - best_cost) <= TIE_EPSILON_KM and displacement < best_displacement)
            ):
                continue
            if feasible is not None and not feasible(
                sequence[:position] + [activity] + sequence[position:]
            ):
                continue
            best_cost = cost
            best_position = position
            best_displacement = displacement
        sequence.insert(best_position, activity)

    return sequence


def optimize_route(
    activities: list[Activity],
    locked_ids: Collection[str],
    feasible: Feasibility | None = None,
) -> list[Activity]:
    """Reorder a day's activities to reduce travel distance.

    Args:
        activities: Day's activities in current order
        locked_ids: Ids treated as fixed anchors
        feasible: Optional check restricting where unlocked stops may go
            relative to anchors

    Returns:
        New list containing the same activities
    """
    anchors = [a for a in activities if a.id in locked_ids]
    unlocked = [a for a in activities if a.id not in locked_ids]

    # Nothing to optimize
    if len(unlocked) <= 1:
        return list(activities)

    if not anchors:
        return order_nearest_neighbor(unlocked)

    input_order = {a.id: i for i, a in enumerate(activities)}
    return insert_around_anchors(anchors, unlocked, input_order, feasible)
