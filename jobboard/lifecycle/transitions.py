from typing import Dict, FrozenSet, Iterable, Mapping

from .errors import InvalidTransition

APPLICATION_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "submitted": frozenset({"reviewed", "rejected", "withdrawn"}),
    "reviewed": frozenset({"shortlisted", "rejected", "withdrawn"}),
    "shortlisted": frozenset({"interviewing", "rejected", "withdrawn"}),
    "interviewing": frozenset({"offered", "rejected", "withdrawn"}),
    "offered": frozenset({"hired", "rejected"}),
    "rejected": frozenset(),
    "hired": frozenset(),
    "withdrawn": frozenset(),
}

JOB_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "draft": frozenset({"pending-approval"}),
    "pending-approval": frozenset({"active", "rejected", "closed", "filled"}),
    "active": frozenset({"closed", "filled"}),
    "closed": frozenset({"active"}),
    "filled": frozenset({"active"}),
    "rejected": frozenset(),
}


class TransitionTable:
    """Legal (current -> target) status edges for one kind of entity."""

    def __init__(self, entity: str, edges: Mapping[str, Iterable[str]]):
        self.entity = entity
        self._edges = {state: frozenset(targets) for state, targets in edges.items()}

    @property
    def states(self) -> FrozenSet[str]:
        return frozenset(self._edges)

    def allowed_targets(self, current: str) -> FrozenSet[str]:
        return self._edges.get(current, frozenset())

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.allowed_targets(current)

    def is_terminal(self, status: str) -> bool:
        return status in self._edges and not self._edges[status]

    def ensure(self, current: str, target: str) -> None:
        if not self.can_transition(current, target):
            raise InvalidTransition(self.entity, current, target)


APPLICATION_TABLE = TransitionTable("application", APPLICATION_TRANSITIONS)
JOB_TABLE = TransitionTable("job", JOB_TRANSITIONS)
