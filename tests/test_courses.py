from tests.conftest import auth_header, login


def test_moderator_creates_course_and_lessons(client):
    mod = login(client, "mod2@example.com")
    r = client.post(
        "/courses",
        headers=auth_header(mod),
        json={"title": "Geometry", "description": "Shapes"},
    )
    assert r.status_code == 201, r.text
    course = r.json()
    assert course["is_public"] is False
    assert course["is_active"] is True

    for idx, title in [(1, "Angles"), (0, "Points")]:
        r = client.post(
            f"/courses/{course['id']}/lessons",
            headers=auth_header(mod),
            json={"title": title, "order_index": idx},
        )
        assert r.status_code == 201, r.text

    r = client.get(f"/courses/{course['id']}/lessons", headers=auth_header(mod))
    assert [lesson["title"] for lesson in r.json()] == ["Points", "Angles"]


def test_student_cannot_create_course(client):
    student = login(client, "student1@example.com")
    r = client.post("/courses", headers=auth_header(student), json={"title": "Nope"})
    assert r.status_code == 403


def test_only_owner_or_admin_updates_course(client, seed_data):
    mod2 = login(client, "mod2@example.com")
    r = client.patch(
        f"/courses/{seed_data.course_id}",
        headers=auth_header(mod2),
        json={"title": "Hijacked"},
    )
    assert r.status_code == 403

    admin = login(client, "admin@example.com")
    r = client.patch(
        f"/courses/{seed_data.course_id}",
        headers=auth_header(admin),
        json={"is_public": True},
    )
    assert r.status_code == 200
    assert r.json()["is_public"] is True
    assert r.json()["title"] == "Algebra I"


def test_lesson_update_by_owner(client, seed_data):
    mod = login(client, "mod1@example.com")
    r = client.patch(
        f"/lessons/{seed_data.lesson_id}",
        headers=auth_header(mod),
        json={"title": "Introduction", "order_index": 3},
    )
    assert r.status_code == 200, r.text
    assert r.json()["title"] == "Introduction"
    assert r.json()["order_index"] == 3


def test_assignments_visible_to_enrolled_student_only(client, seed_data):
    student1 = login(client, "student1@example.com")
    r = client.get(
        f"/lessons/{seed_data.lesson_id}/assignments", headers=auth_header(student1)
    )
    assert r.status_code == 200
    assert [a["title"] for a in r.json()] == ["HW1"]

    student2 = login(client, "student2@example.com")
    r = client.get(
        f"/lessons/{seed_data.lesson_id}/assignments", headers=auth_header(student2)
    )
    assert r.status_code == 403


def test_owner_creates_assignment(client, seed_data):
    mod = login(client, "mod1@example.com")
    r = client.post(
        f"/lessons/{seed_data.lesson_id}/assignments",
        headers=auth_header(mod),
        json={"title": "Quiz", "evaluation_type": "automatic", "max_points": 10},
    )
    assert r.status_code == 201, r.text
    assert r.json()["evaluation_type"] == "automatic"


def test_unknown_course_is_404(client):
    student = login(client, "student1@example.com")
    assert client.get("/courses/999999", headers=auth_header(student)).status_code == 404
