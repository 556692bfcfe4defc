from __future__ import annotations

import json

ADMIN_ID = 1
TEACHER_ID = 2
STUDENT_ID = 4


def _new_user(**overrides):
    body = {
        "username": "jdelacruz",
        "email": "jdelacruz@school.edu",
        "password": "secret123",
        "fullName": "Juan Dela Cruz Jr.",
        "role": "student",
    }
    body.update(overrides)
    return body


def test_login_logout(client):
    response = client.post("/api/login", json={"username": "teacher", "password": "password"})

    assert response.status_code == 200
    assert response.get_json()["role"] == "teacher"
    assert client.get("/api/user").get_json()["username"] == "teacher"

    client.post("/api/logout")
    assert client.get("/api/user").status_code == 401


def test_login_bad_password(client):
    response = client.post("/api/login", json={"username": "teacher", "password": "wrong"})

    assert response.status_code == 401
    assert response.get_json() == {"message": "Invalid username or password"}


def test_create_user_twice(login_as, store):
    client = login_as(ADMIN_ID)

    first = client.post("/api/users/create", json=_new_user())
    second = client.post("/api/users/create", json=_new_user())

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.get_json()["message"] == "Username already exists"
    assert [u.username for u in store.users.values()].count("jdelacruz") == 1


def test_create_user_validation_names_field(login_as):
    response = login_as(ADMIN_ID).post("/api/users/create", json=_new_user(email="nope"))

    assert response.status_code == 400
    assert response.get_json()["field"] == "email"


def test_password_never_in_responses(client, login_as):
    bodies = [
        client.post("/api/login", json={"username": "admin", "password": "password"}).get_data(as_text=True),
        client.get("/api/user").get_data(as_text=True),
        client.get("/api/users/list").get_data(as_text=True),
        client.post("/api/users/create", json=_new_user()).get_data(as_text=True),
        client.get("/api/subjects/1/available").get_data(as_text=True),
    ]

    for body in bodies:
        assert "password" not in body.lower()
        assert "scrypt" not in body and "pbkdf2" not in body


def test_users_list_by_role(login_as):
    users = login_as(TEACHER_ID).get("/api/users/list?role=teacher").get_json()

    assert {u["username"] for u in users} == {"teacher", "teacher2"}


def test_users_list_bad_role(login_as):
    assert login_as(TEACHER_ID).get("/api/users/list?role=janitor").status_code == 400


def test_update_own_profile(login_as):
    response = login_as(STUDENT_ID).put("/api/users/4", json={"fullName": "Juan D. Cruz"})

    assert response.status_code == 200
    assert response.get_json()["fullName"] == "Juan D. Cruz"


def test_enroll_signals_stale_student_list(login_as):
    client = login_as(TEACHER_ID)

    first = client.post("/api/subjects/1/enroll", json={"studentId": STUDENT_ID})
    again = client.post("/api/subjects/1/enroll", json={"studentId": STUDENT_ID})

    assert first.status_code == 200
    assert first.headers["X-Invalidate"] == "subjects/1/students"
    assert again.status_code == 400
    assert [s["id"] for s in client.get("/api/subjects/1/students").get_json()] == [STUDENT_ID]


def test_bulk_enroll_and_unenroll(login_as):
    client = login_as(TEACHER_ID)

    bulk = client.post("/api/subjects/1/enroll/bulk", json={"studentIds": [4, 5, 6, 7, 8]})
    assert bulk.status_code == 201
    assert bulk.get_json() == {"enrolled": 5}
    assert bulk.headers["X-Invalidate"] == "subjects/1/students"

    removed = client.delete("/api/subjects/1/students/5")
    assert removed.status_code == 204
    assert removed.headers["X-Invalidate"] == "subjects/1/students"

    available = {s["id"] for s in client.get("/api/subjects/1/available").get_json()}
    assert available == {5, 9}


def test_available_with_section_filter(login_as):
    response = login_as(TEACHER_ID).get("/api/subjects/1/available?sectionId=1")

    assert {s["id"] for s in response.get_json()} == {4, 5}


def test_subject_crud(login_as, store):
    client = login_as(TEACHER_ID)

    created = client.post("/api/subjects", json={"name": "Algorithms", "code": "CS301"})
    assert created.status_code == 201
    subject = created.get_json()
    assert subject["teacherId"] == TEACHER_ID

    updated = client.put(f"/api/subjects/{subject['id']}", json={"description": "Sorting and searching"})
    assert updated.get_json()["description"] == "Sorting and searching"

    assert client.delete(f"/api/subjects/{subject['id']}").status_code == 204
    assert client.get(f"/api/subjects/{subject['id']}").status_code == 404


def test_teacher_cannot_assign_subject_to_someone_else(login_as):
    response = login_as(TEACHER_ID).post("/api/subjects", json={"name": "X", "code": "X1", "teacherId": 3})

    assert response.status_code == 403


def test_section_crud_and_membership(login_as):
    client = login_as(ADMIN_ID)

    section = client.post("/api/sections", json={"name": "BSIT 2-B", "code": "BSIT-2B"}).get_json()
    assert client.post(f"/api/sections/{section['id']}/enroll", json={"studentId": 6}).status_code == 201
    assert [s["id"] for s in client.get(f"/api/sections/{section['id']}/students").get_json()] == [6]
    assert client.delete(f"/api/sections/{section['id']}/students/6").status_code == 204
    assert client.delete(f"/api/sections/{section['id']}").status_code == 204
    assert client.get(f"/api/sections/{section['id']}").status_code == 404


def test_schedule_create_validates_times(login_as):
    client = login_as(TEACHER_ID)

    bad = client.post(
        "/api/schedules",
        json={"subjectId": 1, "dayOfWeek": "Tuesday", "startTime": "11:00", "endTime": "10:00", "room": "Q1"},
    )
    good = client.post(
        "/api/schedules",
        json={"subjectId": 1, "dayOfWeek": "Tuesday", "startTime": "10:00", "endTime": "11:00", "room": "Q1"},
    )

    assert bad.status_code == 400
    assert bad.get_json()["field"] == "endTime"
    assert good.status_code == 201
    assert len(client.get("/api/subjects/1/schedules").get_json()) == 2


def test_qr_flow_and_checkin(login_as, container):
    teacher = login_as(TEACHER_ID)
    teacher.post("/api/subjects/1/enroll", json={"studentId": STUDENT_ID})
    teacher.post("/api/subjects/1/qr", json={"code": "ABC123"})
    assert teacher.post("/api/subjects/1/qr", json={"code": "XYZ789"}).status_code == 201
    assert teacher.get("/api/subjects/1/qr").get_json()["code"] == "XYZ789"

    image = teacher.get("/api/subjects/1/qr.png")
    assert image.mimetype == "image/png"

    student = login_as(STUDENT_ID)
    assert student.post("/api/attendance/checkin", json={"code": "ABC123"}).status_code == 400
    checked = student.post("/api/attendance/checkin", json={"code": "XYZ789"})
    assert checked.status_code == 201
    assert checked.get_json()["status"] in ("present", "late")

    summary = student.get("/api/attendance/summary?subjectId=1").get_json()
    assert summary["counts"]["total"] == 1


def test_mark_attendance_bad_status(login_as):
    client = login_as(TEACHER_ID)
    client.post("/api/subjects/1/enroll", json={"studentId": STUDENT_ID})

    response = client.post(
        "/api/attendance",
        data=json.dumps({"studentId": STUDENT_ID, "subjectId": 1, "date": "2026-02-02", "status": "sick"}),
        content_type="application/json",
    )

    assert response.status_code == 400
    assert response.get_json()["field"] == "status"


def test_non_object_body_rejected(login_as):
    response = login_as(TEACHER_ID).post("/api/subjects", json=[1, 2])

    assert response.status_code == 400


def test_non_string_date_rejected(login_as):
    client = login_as(TEACHER_ID)
    client.post("/api/subjects/1/enroll", json={"studentId": STUDENT_ID})

    response = client.post(
        "/api/attendance",
        json={"studentId": STUDENT_ID, "subjectId": 1, "date": 20260202, "status": "present"},
    )

    assert response.status_code == 400
    assert response.get_json()["field"] == "date"


def test_non_string_start_time_rejected(login_as):
    response = login_as(TEACHER_ID).post(
        "/api/schedules",
        json={"subjectId": 1, "dayOfWeek": "Tuesday", "startTime": 900, "endTime": "11:00", "room": "Q1"},
    )

    assert response.status_code == 400
    assert response.get_json()["field"] == "startTime"


def test_non_string_password_rejected(login_as, store):
    response = login_as(ADMIN_ID).post("/api/users/create", json=_new_user(password=12345678))

    assert response.status_code == 400
    assert response.get_json()["field"] == "password"
    assert "jdelacruz" not in [u.username for u in store.users.values()]
