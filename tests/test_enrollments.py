from tests.conftest import auth_header, login


def test_student_self_enrolls_once(client, seed_data):
    student = login(client, "student2@example.com")
    r = client.post(
        "/enrollments", headers=auth_header(student), json={"course_id": seed_data.course_id}
    )
    assert r.status_code == 201, r.text
    assert r.json()["progress_percentage"] == 0

    r = client.post(
        "/enrollments", headers=auth_header(student), json={"course_id": seed_data.course_id}
    )
    assert r.status_code == 409

    r = client.get("/courses/me", headers=auth_header(student))
    assert [c["id"] for c in r.json()] == [seed_data.course_id]


def test_owner_enrolls_student_but_other_moderator_cannot(client, seed_data):
    admin = login(client, "admin@example.com")
    student2_id = client.get(
        "/users", headers=auth_header(admin), params={"role": "student"}
    ).json()[1]["id"]

    mod2 = login(client, "mod2@example.com")
    r = client.post(
        "/enrollments",
        headers=auth_header(mod2),
        json={"course_id": seed_data.course_id, "student_id": student2_id},
    )
    assert r.status_code == 403

    mod1 = login(client, "mod1@example.com")
    r = client.post(
        "/enrollments",
        headers=auth_header(mod1),
        json={"course_id": seed_data.course_id, "student_id": student2_id},
    )
    assert r.status_code == 201, r.text
    assert r.json()["student_id"] == student2_id


def test_inactive_course_rejects_enrollment(client, seed_data):
    mod = login(client, "mod1@example.com")
    client.patch(
        f"/courses/{seed_data.course_id}", headers=auth_header(mod), json={"is_active": False}
    )

    student = login(client, "student2@example.com")
    r = client.post(
        "/enrollments", headers=auth_header(student), json={"course_id": seed_data.course_id}
    )
    assert r.status_code == 400
