"""Tests for task ID generation and its uniqueness guarantees."""

from datetime import datetime, timedelta, timezone

import pytest

from laundry.core.errors import ConflictError, NotFoundError
from laundry.models.department import Department
from laundry.models.task import Task
from laundry.schemas.task import TaskCreate
from laundry.services import task_service
from laundry.services.task_service import (
    TaskService,
    department_code,
    generate_task_id,
    next_sequence,
)

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


def _create(db_session, department, user, **overrides) -> Task:
    data = TaskCreate(
        description=overrides.pop("description", "Theatre gowns"),
        requested_by_id=user.id,
        department_id=department.id,
        due_date=NOW + timedelta(days=1),
        **overrides,
    )
    return TaskService(db_session).create(data, now=NOW)


class TestHelpers:
    def test_department_code_uppercases_first_two_letters(self):
        assert department_code("Cardiology") == "CA"
        assert department_code("icu") == "IC"

    def test_department_code_placeholder(self):
        assert department_code(None) == "XX"
        assert department_code("") == "XX"

    def test_next_sequence_ignores_foreign_and_non_numeric_ids(self):
        ids = ["25-CA-0003", "25-CA-0010", "25-CA-abcd", "24-CA-0099", "25-CH-0050"]
        assert next_sequence(ids, "25-CA-") == 11

    def test_next_sequence_starts_at_one(self):
        assert next_sequence([], "25-CA-") == 1


class TestGenerateTaskId:
    def test_first_id_for_department_and_year(self, db_session, department):
        assert generate_task_id(db_session, department.id, NOW) == "25-CA-0001"

    def test_unknown_department_uses_placeholder(self, db_session):
        assert generate_task_id(db_session, 9999, NOW) == "25-XX-0001"

    def test_sequence_follows_highest_existing_suffix(self, db_session, department, staff_user):
        _create(db_session, department, staff_user, task_id="25-CA-0041")
        assert generate_task_id(db_session, department.id, NOW) == "25-CA-0042"

    def test_sequences_are_partitioned_by_department(self, db_session, department, staff_user):
        surgery = Department(name="Surgery")
        db_session.add(surgery)
        db_session.commit()

        _create(db_session, department, staff_user)
        _create(db_session, department, staff_user)
        assert generate_task_id(db_session, surgery.id, NOW) == "25-SU-0001"

    def test_sequences_are_partitioned_by_year(self, db_session, department, staff_user):
        _create(db_session, department, staff_user)
        next_year = NOW.replace(year=2026)
        assert generate_task_id(db_session, department.id, next_year) == "26-CA-0001"


class TestCreateWithIds:
    def test_generated_ids_are_sequential_and_unique(self, db_session, department, staff_user):
        ids = [_create(db_session, department, staff_user).task_id for _ in range(3)]
        assert ids == ["25-CA-0001", "25-CA-0002", "25-CA-0003"]

    def test_supplied_id_is_kept(self, db_session, department, staff_user):
        task = _create(db_session, department, staff_user, task_id="MANUAL-7")
        assert task.task_id == "MANUAL-7"

    def test_duplicate_supplied_id_is_rejected(self, db_session, department, staff_user):
        _create(db_session, department, staff_user, task_id="25-CA-0005")
        with pytest.raises(ConflictError):
            _create(db_session, department, staff_user, task_id="25-CA-0005")
        assert db_session.query(Task).count() == 1

    def test_generated_id_collision_is_retried(self, db_session, department, staff_user, monkeypatch):
        _create(db_session, department, staff_user, task_id="25-CA-0001")
        candidates = iter(["25-CA-0001", "25-CA-0002"])
        monkeypatch.setattr(task_service, "generate_task_id", lambda db, dept_id, now: next(candidates))

        task = _create(db_session, department, staff_user)

        assert task.task_id == "25-CA-0002"
        assert db_session.query(Task).count() == 2

    def test_persistent_collision_gives_up_with_conflict(self, db_session, department, staff_user, monkeypatch):
        _create(db_session, department, staff_user, task_id="25-CA-0001")
        monkeypatch.setattr(task_service, "generate_task_id", lambda db, dept_id, now: "25-CA-0001")

        with pytest.raises(ConflictError):
            TaskService(db_session, max_retries=3).create(
                TaskCreate(
                    description="Scrubs",
                    requested_by_id=staff_user.id,
                    department_id=department.id,
                    due_date=NOW,
                ),
                now=NOW,
            )
        assert db_session.query(Task).count() == 1

    def test_missing_department_is_not_found(self, db_session, staff_user):
        data = TaskCreate(
            description="Scrubs", requested_by_id=staff_user.id, department_id=424242, due_date=NOW
        )
        with pytest.raises(NotFoundError):
            TaskService(db_session).create(data, now=NOW)
        assert db_session.query(Task).count() == 0
