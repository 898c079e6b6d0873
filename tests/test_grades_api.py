import pytest


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_student_report_summary(client, seed):
    r = client.get(f"/students/{seed['ada_id']}/grades")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["student_name"] == "Ada Lovelace"
    assert body["student_email"] == "ada@example.com"
    assert (body["total_items"], body["graded_items"], body["awaiting_grading"]) == (5, 5, 0)

    summary = body["summary"]
    assert summary["quiz_average"] == pytest.approx(85)
    assert summary["assignment_average"] == pytest.approx(45)
    assert summary["exam_average"] == pytest.approx(75)
    assert summary["class_standing"] == pytest.approx(45)
    assert summary["final_grade"] == pytest.approx(57)
    assert (summary["quiz_count"], summary["assignment_count"], summary["exam_count"]) == (2, 2, 1)


def test_student_report_items_ordered_by_due_date(client, seed):
    r = client.get(f"/students/{seed['ada_id']}/grades")
    items = r.json()["items"]

    assert [i["item_title"] for i in items] == ["Essay", "Midterm", "Lab report", "Fractions", "Decimals"]

    lab = items[2]
    assert lab["category"] == "assignment"
    assert lab["max_score"] == 0
    assert lab["raw_grade"] == 5
    assert lab["percentage"] == 0
    assert lab["status"] == "graded"

    # no max score on the item -> out of 100
    assert items[4]["max_score"] == 100
    assert items[4]["percentage"] == pytest.approx(90)


def test_student_report_statuses(client, seed):
    r = client.get(f"/students/{seed['alan_id']}/grades")
    assert r.status_code == 200, r.text
    body = r.json()

    statuses = {i["item_title"]: (i["status"], i["percentage"]) for i in body["items"]}
    assert statuses == {
        "Essay": ("graded", pytest.approx(50)),
        "Midterm": ("pending", None),
        "Fractions": ("submitted", None),
    }
    assert (body["total_items"], body["graded_items"], body["awaiting_grading"]) == (3, 1, 1)

    # ungraded work does not count, empty categories average 0
    summary = body["summary"]
    assert summary["quiz_average"] == 0
    assert summary["class_standing"] == pytest.approx(7.5)
    assert summary["final_grade"] == pytest.approx(4.5)


@pytest.mark.parametrize("who", ["bob_id", "teacher_id", "admin_id"])
def test_student_report_not_found(client, seed, who):
    r = client.get(f"/students/{seed[who]}/grades")
    assert r.status_code == 404
    assert r.json()["detail"] == "Student not found"


def test_teacher_report_lists_active_students_by_last_name(client, seed):
    r = client.get(f"/teachers/{seed['teacher_id']}/grades/report")
    assert r.status_code == 200, r.text
    rows = r.json()

    assert [row["student_name"] for row in rows] == ["Ada Lovelace", "Alan Turing"]
    assert rows[0]["summary"]["final_grade"] == pytest.approx(57)
    assert rows[1]["summary"]["final_grade"] == pytest.approx(4.5)


def test_teacher_report_matches_student_report(client, seed):
    roster = client.get(f"/teachers/{seed['teacher_id']}/grades/report").json()
    single = client.get(f"/students/{seed['ada_id']}/grades").json()

    ada_row = next(row for row in roster if row["student_id"] == seed["ada_id"])
    assert ada_row["summary"] == single["summary"]


def test_teacher_overview(client, seed):
    r = client.get(f"/teachers/{seed['teacher_id']}/grades/overview")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["total_students"] == 2
    assert (body["total_assignments"], body["total_quizzes"], body["total_exams"]) == (2, 2, 1)
    assert body["total_graded"] == 6
    assert body["pending_grading"] == 1
    assert body["average_final_grade"] == pytest.approx(30.75)

    assert body["pass_rate"] == {"passing_students": 1, "graded_students": 2, "pass_rate": 50}
    assert [b["count"] for b in body["distribution"]] == [2, 1, 1, 2]
    assert [b["share"] for b in body["distribution"]] == [33, 17, 17, 33]


def test_teacher_without_students(client, seed):
    teacher_id = seed["idle_teacher_id"]

    assert client.get(f"/teachers/{teacher_id}/grades/report").json() == []

    body = client.get(f"/teachers/{teacher_id}/grades/overview").json()
    assert body["total_students"] == 0
    assert body["total_graded"] == 0
    assert body["average_final_grade"] is None
    assert body["pass_rate"]["pass_rate"] == 0
    assert all(b["count"] == 0 for b in body["distribution"])


@pytest.mark.parametrize("path", ["grades/report", "grades/overview"])
def test_teacher_endpoints_reject_non_teachers(client, seed, path):
    r = client.get(f"/teachers/{seed['ada_id']}/{path}")
    assert r.status_code == 404
    assert r.json()["detail"] == "Teacher not found"
