import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from readtrack.db import Base
from readtrack.domain.summaries import service
from readtrack.models import Book, Comment, Summary, User


def _create(client, headers, user, book, **extra):
    body = {"bookId": book.id, "content": "A thoughtful summary."}
    body.update(extra)
    return client.post("/summaries", json=body, headers=headers(user))


def test_create_summary_awards_points(client, db, make_user, make_book, headers):
    student = make_user(name="Ana")
    book = make_book(title="Dune")
    r = _create(client, headers, student, book)
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["title"] == 'Summary of "Dune" by Ana'
    assert data["rating"] is None
    db.refresh(student)
    assert student.points == 50


def test_duplicate_summary_is_conflict(client, make_user, make_book, headers):
    student, book = make_user(), make_book()
    assert _create(client, headers, student, book).status_code == 201
    r = _create(client, headers, student, book)
    assert r.status_code == 409


def test_create_requires_content(client, make_user, make_book, headers):
    r = _create(client, headers, make_user(), make_book(), content="   ")
    assert r.status_code == 400


def test_teacher_rating_with_feedback(client, db, make_user, make_book, make_summary, headers):
    student, teacher = make_user(), make_user(role="TEACHER")
    summary = make_summary(student, make_book())

    r = client.patch(
        f"/summaries/{summary.id}",
        json={"rating": 3, "feedback": "Good analysis"},
        headers=headers(teacher),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["rating"] == 3
    assert r.json()["data"]["ratedAt"] is not None

    db.refresh(student)
    assert student.points == 30
    comment = db.query(Comment).filter_by(summary_id=summary.id).one()
    assert comment.content == "Teacher Feedback: Good analysis"
    assert comment.author_id == teacher.id
    assert comment.kind == "feedback"

    detail = client.get(f"/summaries/{summary.id}").json()["data"]
    assert detail["comments"][0]["content"] == "Teacher Feedback: Good analysis"


def test_rerating_overwrites_without_second_bonus(client, db, make_user, make_book, make_summary, headers):
    student, teacher = make_user(), make_user(role="TEACHER")
    summary = make_summary(student, make_book())

    client.patch(f"/summaries/{summary.id}", json={"rating": 5}, headers=headers(teacher))
    r = client.patch(f"/summaries/{summary.id}", json={"rating": 2}, headers=headers(teacher))
    assert r.status_code == 200
    assert r.json()["data"]["rating"] == 2
    db.refresh(student)
    assert student.points == 50


@pytest.mark.parametrize("rating", [0, 6, 3.5, "4", None, True])
def test_invalid_rating_is_400(client, make_user, make_book, make_summary, headers, rating):
    student, teacher = make_user(), make_user(role="TEACHER")
    summary = make_summary(student, make_book())
    r = client.patch(f"/summaries/{summary.id}", json={"rating": rating}, headers=headers(teacher))
    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.parametrize("rating", [1, 5, 4.0])
def test_boundary_ratings_accepted(client, db, make_user, make_book, make_summary, headers, rating):
    student, admin = make_user(), make_user(role="ADMIN")
    summary = make_summary(student, make_book())
    r = client.patch(f"/summaries/{summary.id}", json={"rating": rating}, headers=headers(admin))
    assert r.status_code == 200
    db.refresh(student)
    assert student.points == int(rating) * 10


def test_student_cannot_rate(client, make_user, make_book, make_summary, headers):
    student = make_user()
    summary = make_summary(make_user(), make_book())
    r = client.patch(f"/summaries/{summary.id}", json={"rating": 4}, headers=headers(student))
    assert r.status_code == 403


def test_rating_requires_authentication(client, make_user, make_book, make_summary):
    summary = make_summary(make_user(), make_book())
    r = client.patch(f"/summaries/{summary.id}", json={"rating": 4})
    assert r.status_code == 401


def test_rating_unknown_summary_is_404(client, make_user, headers):
    r = client.patch("/summaries/999", json={"rating": 4}, headers=headers(make_user(role="TEACHER")))
    assert r.status_code == 404


def test_delete_only_by_author_or_admin(client, make_user, make_book, make_summary, headers):
    author, other, admin = make_user(), make_user(), make_user(role="ADMIN")
    summary = make_summary(author, make_book())
    assert client.delete(f"/summaries/{summary.id}", headers=headers(other)).status_code == 403
    assert client.delete(f"/summaries/{summary.id}", headers=headers(admin)).status_code == 200
    assert client.get(f"/summaries/{summary.id}").status_code == 404


def test_list_summaries_by_book(client, make_user, make_book, make_summary):
    book, other_book = make_book(), make_book()
    make_summary(make_user(), book)
    make_summary(make_user(), book)
    make_summary(make_user(), other_book)
    data = client.get("/summaries", params={"bookId": book.id}).json()["data"]
    assert len(data["summaries"]) == 2
    assert data["pagination"]["totalCount"] == 2


def test_concurrent_first_ratings_pay_bonus_once(tmp_path):
    # dos sesiones sobre el mismo archivo: A carga el resumen sin calificar,
    # B lo califica y confirma, luego A califica con su copia desactualizada
    engine = create_engine(f"sqlite:///{tmp_path / 'ratings.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with Session() as setup:
        student = User(name="S", email="s@example.com", password="x", role="STUDENT")
        teacher = User(name="T", email="t@example.com", password="x", role="TEACHER")
        book = Book(title="B", author="A", category="Fiction", pages=100)
        setup.add_all([student, teacher, book])
        setup.flush()
        summary = Summary(title="S", content="c", author_id=student.id, book_id=book.id)
        setup.add(summary)
        setup.commit()
        student_id, teacher_id, summary_id = student.id, teacher.id, summary.id

    session_a, session_b = Session(), Session()
    try:
        stale = session_a.get(Summary, summary_id)
        assert stale.rating is None

        result_b = service.rate_summary(session_b, session_b.get(User, teacher_id), summary_id, rating=5)
        result_a = service.rate_summary(session_a, session_a.get(User, teacher_id), summary_id, rating=5)

        assert result_b.points_awarded == 50
        assert result_a.points_awarded == 0
        assert result_a.summary.rating == 5
    finally:
        session_a.close()
        session_b.close()

    with Session() as check:
        assert check.get(User, student_id).points == 50
    engine.dispose()
