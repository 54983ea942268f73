"""Tests for the reference-data guards."""

import pytest

from jobboard.lifecycle import guards
from jobboard.lifecycle.errors import Conflict, NotFound, ValidationError
from jobboard.models.taxonomy import JobCategory, Skill


@pytest.fixture
def skill():
    return Skill(id="s1", name="  Python ")


@pytest.fixture
def parents():
    # tech > web > frontend, sales (top level)
    return {"tech": None, "web": "tech", "frontend": "web", "sales": None}


def test_skill_name_is_normalised(skill):
    assert skill.name == "python"
    assert skill.display_name == "Python"


def test_unused_skill_is_deletable(skill):
    guards.ensure_skill_deletable(skill, 0)


def test_used_skill_needs_force(skill):
    with pytest.raises(Conflict) as exc_info:
        guards.ensure_skill_deletable(skill, 4)
    assert exc_info.value.context["usage_count"] == 4

    guards.ensure_skill_deletable(skill, 4, force=True)


def test_top_level_category_is_fine(parents):
    guards.validate_category_parent(None, None, parents)


def test_new_category_under_existing_parent(parents):
    guards.validate_category_parent(None, "tech", parents)


def test_self_parent(parents):
    with pytest.raises(ValidationError):
        guards.validate_category_parent("web", "web", parents)


def test_missing_parent(parents):
    with pytest.raises(NotFound):
        guards.validate_category_parent(None, "ghost", parents)


def test_cycle_is_rejected(parents):
    # tech under frontend would close tech > web > frontend > tech
    with pytest.raises(ValidationError) as exc_info:
        guards.validate_category_parent("tech", "frontend", parents)
    assert "Circular" in exc_info.value.message


def test_depth_limit_for_new_category(parents):
    with pytest.raises(ValidationError) as exc_info:
        guards.validate_category_parent(None, "frontend", parents, max_depth=3)
    assert exc_info.value.context["max_depth"] == 3

    guards.validate_category_parent(None, "frontend", parents, max_depth=4)


def test_depth_limit_counts_moved_subtree(parents):
    # web carries frontend with it, so under sales the tree is 3 deep
    guards.validate_category_parent("web", "sales", parents, max_depth=3)
    with pytest.raises(ValidationError):
        guards.validate_category_parent("web", "sales", parents, max_depth=2)


def test_category_delete_guard():
    category = JobCategory(id="tech", name="Technology")
    guards.ensure_category_deletable(category, 0, 0)

    with pytest.raises(Conflict):
        guards.ensure_category_deletable(category, 2, 0)
    with pytest.raises(Conflict) as exc_info:
        guards.ensure_category_deletable(category, 0, 5)
    assert exc_info.value.context["job_count"] == 5

    guards.ensure_category_deletable(category, 2, 5, force=True)


def test_saved_job_target(make_job):
    job = make_job()
    assert guards.ensure_saved_job_target(job, job.id) is job
    with pytest.raises(NotFound):
        guards.ensure_saved_job_target(None, "gone")
