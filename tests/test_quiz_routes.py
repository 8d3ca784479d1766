from fake_motor import FACULTY, OTHER_STUDENT, STUDENT, TA


def _create_quiz(client, **fields):
    response = client.post("/api/courses/course-1/quizzes", json=fields)
    assert response.status_code == 200
    return response.json()


def _add_question(client, quiz_id, **fields):
    response = client.post(f"/api/quizzes/{quiz_id}/questions", json=fields)
    assert response.status_code == 200
    return response.json()


def _published_quiz(client, **fields):
    quiz = _create_quiz(client, **fields)
    q1 = _add_question(client, quiz["id"], questionType="MULTIPLE_CHOICE", points=5,
                       choices=["A", "B", "C"], correctAnswer="B")
    q2 = _add_question(client, quiz["id"], questionType="FILL_IN_THE_BLANK", points=5,
                       correctAnswers=["Paris", "paris, France"])
    client.put(f"/api/quizzes/{quiz['id']}/publish", json={"isPublished": True})
    return quiz["id"], q1["id"], q2["id"]


def test_health(client_as):
    client = client_as(None)
    assert client.get("/").status_code == 200
    body = client.get("/health").json()
    assert body["status"]["database"] == "UP"


def test_requests_without_token_are_unauthorized(client_as):
    client = client_as(None)
    assert client.get("/api/courses/course-1/quizzes").status_code == 401
    assert client.post("/api/quizzes/x/submit", json={"answers": []}).status_code == 401


def test_invalid_token_is_unauthorized(client_as):
    client = client_as(None)
    response = client.get("/api/quizzes/x", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_students_cannot_manage_quizzes(client_as):
    faculty = client_as(FACULTY)
    quiz = _create_quiz(faculty)

    student = client_as(STUDENT)
    assert student.post("/api/courses/course-1/quizzes", json={}).status_code == 403
    assert student.put(f"/api/quizzes/{quiz['id']}", json={"title": "x"}).status_code == 403
    assert student.delete(f"/api/quizzes/{quiz['id']}").status_code == 403
    assert student.post(f"/api/quizzes/{quiz['id']}/questions", json={}).status_code == 403


def test_faculty_cannot_submit(client_as):
    client = client_as(FACULTY)
    quiz_id, q1, _ = _published_quiz(client)
    response = client.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": []})
    assert response.status_code == 403


def test_question_edits_keep_points_in_sync(client_as):
    client = client_as(FACULTY)
    quiz = _create_quiz(client, title="Quiz 1")
    assert quiz["points"] == 0

    question = _add_question(client, quiz["id"], questionType="TRUE_FALSE", correctAnswer="True")
    assert question["points"] == 10

    updated = client.put(f"/api/quizzes/{quiz['id']}/questions/{question['id']}", json={"points": 7}).json()
    assert updated["points"] == 7
    assert updated["questions"][0]["correctAnswer"] == "True"

    deleted = client.delete(f"/api/quizzes/{quiz['id']}/questions/{question['id']}").json()
    assert deleted["points"] == 0
    assert deleted["questions"] == []


def test_unknown_quiz_or_question_is_not_found(client_as):
    client = client_as(FACULTY)
    quiz = _create_quiz(client)

    assert client.get("/api/quizzes/missing").status_code == 404
    assert client.put("/api/quizzes/missing", json={"title": "x"}).status_code == 404
    assert client.delete("/api/quizzes/missing").status_code == 404
    assert client.put("/api/quizzes/missing/publish", json={"isPublished": True}).status_code == 404
    assert client.post("/api/quizzes/missing/questions", json={}).status_code == 404
    assert client.put(f"/api/quizzes/{quiz['id']}/questions/missing", json={"points": 1}).status_code == 404
    assert client.delete(f"/api/quizzes/{quiz['id']}/questions/missing").status_code == 404


def test_update_quiz_ignores_points(client_as):
    client = client_as(FACULTY)
    quiz = _create_quiz(client)

    response = client.put(f"/api/quizzes/{quiz['id']}", json={"title": "Midterm", "points": 500})
    assert response.status_code == 200
    assert response.json()["title"] == "Midterm"
    assert response.json()["points"] == 0


def test_submit_scenario_and_last_submission(client_as):
    quiz_id, q1, q2 = _published_quiz(client_as(FACULTY))
    student = client_as(STUDENT)

    response = student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": [
        {"questionId": q1, "studentAnswer": "b"},
        {"questionId": q2, "studentAnswer": "PARIS"},
    ]})
    assert response.status_code == 200
    submission = response.json()
    assert submission["score"] == 10
    assert submission["attemptNumber"] == 1
    assert submission["submitted"] is True
    assert submission["id"] == f"{quiz_id}-{STUDENT.user_id}-1"
    assert [a["isCorrect"] for a in submission["answers"]] == [True, True]

    last = student.get(f"/api/quizzes/{quiz_id}/submissions/last").json()
    assert last["id"] == submission["id"]

    again = student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": []})
    assert again.status_code == 403

    other = client_as(OTHER_STUDENT)
    assert other.get(f"/api/quizzes/{quiz_id}/submissions/last").status_code == 404


def test_submission_omitting_question(client_as):
    quiz_id, q1, _ = _published_quiz(client_as(FACULTY))
    student = client_as(STUDENT)

    submission = student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": [
        {"questionId": q1, "studentAnswer": "B"},
    ]}).json()
    assert submission["score"] == 5
    assert len(submission["answers"]) == 1


def test_blank_question_id_is_graded_incorrect(client_as):
    quiz_id, q1, _ = _published_quiz(client_as(FACULTY))
    student = client_as(STUDENT)

    response = student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": [
        {"questionId": q1, "studentAnswer": "b"},
        {"questionId": " ", "studentAnswer": "x"},
    ]})
    assert response.status_code == 200
    submission = response.json()
    assert submission["score"] == 5
    assert [a["isCorrect"] for a in submission["answers"]] == [True, False]
    assert submission["answers"][1]["questionId"] == " "


def test_student_view_hides_answers_and_unpublished_quizzes(client_as):
    faculty = client_as(FACULTY)
    quiz_id, _, _ = _published_quiz(faculty)
    draft = _create_quiz(faculty, title="Draft")

    full = faculty.get(f"/api/quizzes/{quiz_id}").json()
    assert full["questions"][0]["correctAnswer"] == "B"

    student = client_as(STUDENT)
    view = student.get(f"/api/quizzes/{quiz_id}").json()
    assert all("correctAnswer" not in q and "correctAnswers" not in q for q in view["questions"])
    assert view["questions"][0]["choices"] == ["A", "B", "C"]
    assert view["lastSubmission"] is None

    assert student.get(f"/api/quizzes/{draft['id']}").status_code == 403
    assert client_as(TA).get(f"/api/quizzes/{draft['id']}").status_code == 403


def test_course_listing_by_role(client_as):
    faculty = client_as(FACULTY)
    quiz_id, q1, _ = _published_quiz(faculty)
    _create_quiz(faculty, title="Draft")

    assert len(faculty.get("/api/courses/course-1/quizzes").json()) == 2

    student = client_as(STUDENT)
    listed = student.get("/api/courses/course-1/quizzes").json()
    assert [q["id"] for q in listed] == [quiz_id]
    assert listed[0]["lastScore"] is None

    student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": [{"questionId": q1, "studentAnswer": "b"}]})
    listed = student.get("/api/courses/course-1/quizzes").json()
    assert listed[0]["lastScore"] == 5

    ta_listing = client_as(TA).get("/api/courses/course-1/quizzes").json()
    assert [q["id"] for q in ta_listing] == [quiz_id]
    assert "lastScore" not in ta_listing[0]


def test_delete_quiz_removes_submissions(client_as, db):
    faculty = client_as(FACULTY)
    quiz_id, q1, _ = _published_quiz(faculty, multipleAttempts=True, howManyAttempts=2)
    student = client_as(STUDENT)
    student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": []})
    student.post(f"/api/quizzes/{quiz_id}/submit", json={"answers": []})

    response = client_as(FACULTY).delete(f"/api/quizzes/{quiz_id}")
    assert response.json() == {"deletedCount": 1, "submissionsDeleted": 2}
    assert db.quiz_submissions.docs == []


def test_storage_failure_returns_500(client_as, db):
    client = client_as(FACULTY)
    quiz = _create_quiz(client)
    db.quizzes.fail_on.add("update_one")

    response = client.post(f"/api/quizzes/{quiz['id']}/questions", json={"points": 1})

    assert response.status_code == 500
    assert response.json()["message"] == "Internal Server Error"
