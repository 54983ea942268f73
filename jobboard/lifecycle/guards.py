"""Cross-entity checks for skills, job categories and saved jobs."""

from typing import Dict, Mapping, Optional

from jobboard.models.job import JobPosting
from jobboard.models.taxonomy import JobCategory, Skill

from .errors import Conflict, NotFound, ValidationError

DEFAULT_MAX_CATEGORY_DEPTH = 3


# ===========================
# SKILLS
# ===========================

def ensure_skill_deletable(skill: Skill, usage_count: int, force: bool = False) -> None:
    """Refuse to drop a skill still referenced by jobs or profiles.

    ``force=True`` skips the check; the caller then strips the skill from
    every referencing document.
    """
    if usage_count > 0 and not force:
        raise Conflict(
            f"Skill '{skill.name}' is used by {usage_count} job(s) or profile(s). "
            "Pass force=true to delete it anyway.",
            skill_id=skill.id,
            usage_count=usage_count,
        )


# ===========================
# CATEGORIES
# ===========================

def _depth(node: str, parents: Mapping[str, Optional[str]]) -> int:
    depth, seen = 1, {node}
    parent = parents.get(node)
    while parent is not None:
        if parent in seen:
            raise ValidationError("Circular reference detected in category hierarchy", category_id=node)
        seen.add(parent)
        depth += 1
        parent = parents.get(parent)
    return depth


def _subtree_height(node: str, parents: Mapping[str, Optional[str]]) -> int:
    children: Dict[str, list] = {}
    for child, parent in parents.items():
        if parent is not None:
            children.setdefault(parent, []).append(child)

    height, frontier, seen = 1, [node], {node}
    while True:
        next_level = [c for n in frontier for c in children.get(n, []) if c not in seen]
        if not next_level:
            return height
        seen.update(next_level)
        frontier = next_level
        height += 1


def validate_category_parent(
    category_id: Optional[str],
    parent_id: Optional[str],
    parents: Mapping[str, Optional[str]],
    max_depth: int = DEFAULT_MAX_CATEGORY_DEPTH,
) -> None:
    """Check that hanging ``category_id`` under ``parent_id`` keeps a tree.

    ``parents`` maps every existing category id to its parent id.
    ``category_id`` is None for a category that does not exist yet.
    """
    if parent_id is None:
        return
    if category_id is not None and parent_id == category_id:
        raise ValidationError("A category cannot be its own parent", category_id=category_id)
    if parent_id not in parents:
        raise NotFound("Parent category not found", parent_id=parent_id)

    ancestor = parent_id
    seen = set()
    while ancestor is not None and ancestor not in seen:
        if ancestor == category_id:
            raise ValidationError(
                "Circular reference detected: cannot create parent-child loop",
                category_id=category_id,
                parent_id=parent_id,
            )
        seen.add(ancestor)
        ancestor = parents.get(ancestor)

    height = _subtree_height(category_id, parents) if category_id is not None else 1
    if _depth(parent_id, parents) + height > max_depth:
        raise ValidationError(
            f"Category hierarchy cannot be deeper than {max_depth} levels",
            parent_id=parent_id,
            max_depth=max_depth,
        )


def ensure_category_deletable(
    category: JobCategory,
    subcategory_count: int,
    job_count: int,
    force: bool = False,
) -> None:
    """Refuse to drop a category that any subcategory or job still points at.

    Inactive subcategories and jobs in any status count too.
    """
    if force:
        return
    if subcategory_count > 0:
        raise Conflict(
            "Cannot delete category with subcategories. Delete or reassign subcategories first.",
            category_id=category.id,
            subcategory_count=subcategory_count,
        )
    if job_count > 0:
        raise Conflict(
            f"Cannot delete category with {job_count} job(s). Reassign jobs first.",
            category_id=category.id,
            job_count=job_count,
        )


# ===========================
# SAVED JOBS
# ===========================

def ensure_saved_job_target(job: Optional[JobPosting], job_id: str) -> JobPosting:
    if job is None:
        raise NotFound("Job not found", job_id=job_id)
    return job
