from dataclasses import dataclass

from .errors import Unauthorized

ADMIN = "admin"
RECRUITER = "recruiter"
JOBSEEKER = "jobseeker"

# legacy role name still present on older user documents
ROLE_ALIASES = {"user": JOBSEEKER}


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller of a lifecycle operation."""

    actor_id: str
    role: str

    def __post_init__(self):
        object.__setattr__(self, "role", ROLE_ALIASES.get(self.role, self.role))

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    def owns(self, owner_id) -> bool:
        return owner_id is not None and str(owner_id) == str(self.actor_id)


def require_admin(actor: Actor, action: str) -> None:
    if not actor.is_admin:
        raise Unauthorized(f"Admin access required to {action}", actor_id=actor.actor_id)


def require_role(actor: Actor, *roles: str) -> None:
    if actor.role not in roles:
        raise Unauthorized(
            f"Only {' or '.join(roles)} users can perform this action",
            actor_id=actor.actor_id,
        )


def require_owner(actor: Actor, owner_id: str, action: str, allow_admin: bool = False) -> None:
    if actor.owns(owner_id):
        return
    if allow_admin and actor.is_admin:
        return
    raise Unauthorized(f"You are not authorized to {action}", actor_id=actor.actor_id)
