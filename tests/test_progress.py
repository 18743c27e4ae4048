from lms.models.course import Course
from lms.models.enrollment import CourseEnrollment
from lms.models.lesson import Lesson
from lms.models.progress import StudentProgress
from tests.conftest import auth_header, login


def track(client, token, lesson_id, **body):
    return client.put(
        f"/lessons/{lesson_id}/progress",
        headers=auth_header(token),
        json=body,
    )


def test_first_update_creates_incomplete_row(client, seed_data):
    student = login(client, "student1@example.com")

    r = track(client, student, seed_data.lesson_id, time_spent=120)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["lesson_id"] == seed_data.lesson_id
    assert body["student_id"] == seed_data.student1_id
    assert body["time_spent"] == 120
    assert body["completed"] is False
    assert body["completion_date"] is None


def test_time_spent_accumulates_on_same_row(client, db, seed_data):
    student = login(client, "student1@example.com")

    id1 = track(client, student, seed_data.lesson_id, time_spent=60).json()["id"]
    track(client, student, seed_data.lesson_id, time_spent=0)
    r = track(client, student, seed_data.lesson_id, time_spent=45)

    assert r.status_code == 200, r.text
    assert r.json()["id"] == id1
    assert r.json()["time_spent"] == 105
    assert db.query(StudentProgress).count() == 1


def test_completion_date_is_set_once(client, seed_data):
    student = login(client, "student1@example.com")

    track(client, student, seed_data.lesson_id, time_spent=30)
    done = track(client, student, seed_data.lesson_id, time_spent=10, completed=True).json()
    assert done["completed"] is True
    assert done["completion_date"] is not None
    first_completed_at = done["completion_date"]

    # later updates without a completed flag keep the state and the date
    again = track(client, student, seed_data.lesson_id, time_spent=5).json()
    assert again["completed"] is True
    assert again["completion_date"] == first_completed_at
    assert again["time_spent"] == 45

    # un-completing and completing again does not move the date either
    undone = track(client, student, seed_data.lesson_id, completed=False).json()
    assert undone["completed"] is False
    redone = track(client, student, seed_data.lesson_id, completed=True).json()
    assert redone["completed"] is True
    assert redone["completion_date"] == first_completed_at


def test_completed_on_first_update_sets_date(client, seed_data):
    student = login(client, "student1@example.com")

    r = track(client, student, seed_data.lesson_id, time_spent=300, completed=True)
    assert r.status_code == 200, r.text
    assert r.json()["completed"] is True
    assert r.json()["completion_date"] is not None


def test_negative_time_is_rejected(client, seed_data):
    student = login(client, "student1@example.com")
    r = track(client, student, seed_data.lesson_id, time_spent=-1)
    assert r.status_code == 422


def test_not_enrolled_student_cannot_track(client, seed_data):
    other = login(client, "student2@example.com")
    r = track(client, other, seed_data.lesson_id, time_spent=10)
    assert r.status_code == 403


def test_unknown_lesson_is_404(client):
    student = login(client, "student1@example.com")
    r = track(client, student, 999999, time_spent=10)
    assert r.status_code == 404


def test_my_progress_filters_by_course(client, db, seed_data):
    other_course = Course(title="Geometry", owner_id=seed_data.mod1_id)
    db.add(other_course)
    db.commit()
    db.refresh(other_course)
    other_lesson = Lesson(course_id=other_course.id, title="Angles", order_index=0)
    db.add(other_lesson)
    db.add(CourseEnrollment(course_id=other_course.id, student_id=seed_data.student1_id))
    db.commit()
    db.refresh(other_lesson)

    student = login(client, "student1@example.com")
    track(client, student, seed_data.lesson_id, time_spent=10)
    track(client, student, other_lesson.id, time_spent=20)

    everything = client.get("/progress/me", headers=auth_header(student))
    assert everything.status_code == 200, everything.text
    assert [p["lesson_id"] for p in everything.json()] == [seed_data.lesson_id, other_lesson.id]

    filtered = client.get(
        "/progress/me",
        headers=auth_header(student),
        params={"course_id": other_course.id},
    )
    assert filtered.status_code == 200
    assert [p["lesson_id"] for p in filtered.json()] == [other_lesson.id]


def test_my_progress_only_returns_own_rows(client, seed_data):
    student = login(client, "student1@example.com")
    track(client, student, seed_data.lesson_id, time_spent=10)

    other = login(client, "student2@example.com")
    r = client.get("/progress/me", headers=auth_header(other))
    assert r.status_code == 200
    assert r.json() == []
