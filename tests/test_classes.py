from datetime import datetime

import pytest
from bson import ObjectId

from school_chat.core.results import Status


@pytest.fixture
def teacher(make_user):
    return make_user("mrs_jones", teacher=True)


@pytest.fixture
def classroom(services, teacher):
    teacher_id, token = teacher
    result = services.classes.create_class(token, teacher_id, "10B Physics")
    assert result.status is Status.CREATED
    return result.value


def stored(db, class_id):
    return db.classes.find_one({"_id": class_id})


def test_create_class_requires_teacher(services, make_user, db):
    student_id, token = make_user("pupil")

    result = services.classes.create_class(token, student_id, "Not allowed")

    assert result.status is Status.UNAUTHORIZED
    assert db.classes.count_documents({}) == 0


def test_create_class(services, db, teacher, classroom):
    teacher_id, _ = teacher

    document = stored(db, classroom)
    assert document["teacher"] == teacher_id
    assert document["students"] == []
    assert document["notices"] == [] and document["assignments"] == []
    assert classroom in db.users.find_one({"_id": teacher_id})["classes"]


def test_create_class_with_bad_token(services, teacher):
    teacher_id, _ = teacher

    assert services.classes.create_class(ObjectId(), teacher_id, "X").status is Status.UNAUTHORIZED


def test_get_class_info(services, teacher, classroom):
    teacher_id, token = teacher

    result = services.classes.get_class_info(token, teacher_id, classroom)

    assert result.status is Status.OK
    assert result.value.name == "10B Physics"
    assert services.classes.get_class_info(token, teacher_id, ObjectId()).status is Status.NOT_FOUND


def test_add_and_remove_student(services, db, make_user, teacher, classroom):
    teacher_id, token = teacher
    student_id, _ = make_user("sam")

    assert services.classes.add_student(token, teacher_id, classroom, student_id).status is Status.OK
    assert stored(db, classroom)["students"] == [student_id]
    assert db.users.find_one({"_id": student_id})["classes"] == [classroom]

    assert services.classes.add_student(token, teacher_id, classroom, student_id).status is Status.CONFLICT
    assert stored(db, classroom)["students"] == [student_id]

    assert services.classes.remove_student(token, teacher_id, classroom, student_id).status is Status.OK
    assert stored(db, classroom)["students"] == []
    assert db.users.find_one({"_id": student_id})["classes"] == []

    assert services.classes.remove_student(token, teacher_id, classroom, student_id).status is Status.CONFLICT


def test_add_student_rejects_teachers_and_unknown_users(services, make_user, teacher, classroom):
    teacher_id, token = teacher
    other_teacher, _ = make_user("mr_brown", teacher=True)

    assert services.classes.add_student(token, teacher_id, classroom, other_teacher).status is Status.UNAUTHORIZED
    assert services.classes.add_student(token, teacher_id, classroom, teacher_id).status is Status.UNAUTHORIZED
    assert services.classes.add_student(token, teacher_id, classroom, ObjectId()).status is Status.NOT_FOUND


def test_only_teacher_manages_roster(services, db, make_user, teacher, classroom):
    teacher_id, token = teacher
    student_id, student_token = make_user("sam")
    other_id, _ = make_user("tess")
    services.classes.add_student(token, teacher_id, classroom, student_id)

    result = services.classes.add_student(student_token, student_id, classroom, other_id)

    assert result.status is Status.UNAUTHORIZED
    assert stored(db, classroom)["students"] == [student_id]
    assert services.classes.remove_student(student_token, student_id, classroom, student_id).status is Status.UNAUTHORIZED


def test_missing_class_is_not_found(services, teacher):
    teacher_id, token = teacher

    assert services.classes.add_student(token, teacher_id, ObjectId(), ObjectId()).status is Status.NOT_FOUND
    assert services.classes.create_notice(token, teacher_id, ObjectId(), "t", "d").status is Status.NOT_FOUND


def test_notice_lifecycle(services, db, teacher, classroom):
    teacher_id, token = teacher

    created = services.classes.create_notice(token, teacher_id, classroom, "Trip", "Museum on Friday")
    assert created.status is Status.CREATED
    notice_id = created.value

    edited = services.classes.edit_notice(token, teacher_id, classroom, notice_id, description="Museum on Monday")
    assert edited.status is Status.OK
    notice = stored(db, classroom)["notices"][0]
    assert notice["title"] == "Trip"
    assert notice["description"] == "Museum on Monday"
    assert notice["author"] == teacher_id
    assert notice["image"] is None

    assert services.classes.delete_notice(token, teacher_id, classroom, notice_id).status is Status.OK
    assert stored(db, classroom)["notices"] == []
    assert services.classes.delete_notice(token, teacher_id, classroom, notice_id).status is Status.NOT_FOUND
    assert services.classes.edit_notice(token, teacher_id, classroom, notice_id, title="x").status is Status.NOT_FOUND


def test_non_teacher_cannot_post_notice(services, db, make_user, teacher, classroom):
    teacher_id, token = teacher
    student_id, student_token = make_user("sam")
    services.classes.add_student(token, teacher_id, classroom, student_id)
    services.classes.create_notice(token, teacher_id, classroom, "Exam", "Next week")

    for _ in range(2):
        result = services.classes.create_notice(student_token, student_id, classroom, "Hacked", "!")
        assert result.status is Status.UNAUTHORIZED
        assert result.value is None
        assert len(stored(db, classroom)["notices"]) == 1


def test_edit_targets_notice_by_identity(services, db, teacher, classroom):
    teacher_id, token = teacher
    first = services.classes.create_notice(token, teacher_id, classroom, "First", "1").value
    second = services.classes.create_notice(token, teacher_id, classroom, "Second", "2").value

    services.classes.delete_notice(token, teacher_id, classroom, first)
    services.classes.edit_notice(token, teacher_id, classroom, second, title="Second (updated)")

    notices = stored(db, classroom)["notices"]
    assert [n["_id"] for n in notices] == [second]
    assert notices[0]["title"] == "Second (updated)"


def test_edit_with_no_fields_is_a_no_op(services, db, teacher, classroom):
    teacher_id, token = teacher
    notice_id = services.classes.create_notice(token, teacher_id, classroom, "Title", "Body").value

    assert services.classes.edit_notice(token, teacher_id, classroom, notice_id).status is Status.OK
    assert stored(db, classroom)["notices"][0]["title"] == "Title"


def test_assignment_lifecycle(services, db, teacher, classroom):
    teacher_id, token = teacher
    due = datetime(2026, 11, 2, 9, 0)

    created = services.classes.create_assignment(token, teacher_id, classroom, "Essay", "500 words", due)
    assert created.status is Status.CREATED

    new_due = datetime(2026, 11, 9, 9, 0)
    result = services.classes.edit_assignment(token, teacher_id, classroom, created.value, due_date=new_due)
    assert result.status is Status.OK

    assignment = stored(db, classroom)["assignments"][0]
    assert assignment["title"] == "Essay"
    assert assignment["due_date"].replace(tzinfo=None) == new_due

    assert services.classes.delete_assignment(token, teacher_id, classroom, created.value).status is Status.OK
    assert stored(db, classroom)["assignments"] == []


def test_feeds_readable_by_teacher_and_students_only(services, make_user, teacher, classroom):
    teacher_id, token = teacher
    student_id, student_token = make_user("sam")
    outsider_id, outsider_token = make_user("olly")
    services.classes.add_student(token, teacher_id, classroom, student_id)
    services.classes.create_notice(token, teacher_id, classroom, "Welcome", "Hello class")
    services.classes.create_assignment(token, teacher_id, classroom, "HW1", "p. 12", datetime(2026, 11, 2))

    notices = services.classes.get_notices(student_token, student_id, classroom)
    assignments = services.classes.get_assignments(token, teacher_id, classroom)

    assert [n.title for n in notices.value] == ["Welcome"]
    assert [a.title for a in assignments.value] == ["HW1"]
    assert services.classes.get_notices(outsider_token, outsider_id, classroom).status is Status.UNAUTHORIZED


def test_delete_class(services, db, make_user, teacher, classroom):
    teacher_id, token = teacher
    student_id, student_token = make_user("sam")
    services.classes.add_student(token, teacher_id, classroom, student_id)

    assert services.classes.delete_class(student_token, student_id, classroom).status is Status.UNAUTHORIZED
    assert services.classes.delete_class(token, teacher_id, classroom).status is Status.OK
    assert stored(db, classroom) is None
    assert db.users.find_one({"_id": student_id})["classes"] == []
    assert db.users.find_one({"_id": teacher_id})["classes"] == []


@pytest.mark.parametrize("outsider", ["student", "other_teacher"])
def test_only_teacher_of_record_writes_notices_and_assignments(services, db, make_user, teacher, classroom, outsider):
    teacher_id, token = teacher
    if outsider == "student":
        caller_id, caller_token = make_user("sam")
        services.classes.add_student(token, teacher_id, classroom, caller_id)
    else:
        caller_id, caller_token = make_user("mr_brown", teacher=True)
    notice_id = services.classes.create_notice(token, teacher_id, classroom, "Exam", "Next week").value
    assignment_id = services.classes.create_assignment(
        token, teacher_id, classroom, "Essay", "Two pages", due_date=datetime(2030, 5, 1)
    ).value
    before = stored(db, classroom)

    created = services.classes.create_assignment(
        caller_token, caller_id, classroom, "Fake", "!", due_date=datetime(2030, 5, 2)
    )
    edited = services.classes.edit_notice(caller_token, caller_id, classroom, notice_id, title="Cancelled")
    deleted = services.classes.delete_assignment(caller_token, caller_id, classroom, assignment_id)

    assert created.status is Status.UNAUTHORIZED
    assert edited.status is Status.UNAUTHORIZED
    assert deleted.status is Status.UNAUTHORIZED
    after = stored(db, classroom)
    assert after["notices"] == before["notices"]
    assert after["assignments"] == before["assignments"]
