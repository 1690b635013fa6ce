from sqlalchemy.exc import SQLAlchemyError

from readtrack.domain.reading import progress as progress_module
from readtrack.domain.summaries import service as summaries_module
from readtrack.models import ReadingProgress, Summary


def _post(client, headers, user, **body):
    return client.post("/reading-progress", json=body, headers=headers(user))


def test_halfway_progress_awards_bonus_once(client, db, make_user, make_book, headers):
    user = make_user()
    book = make_book(pages=300)

    r = _post(client, headers, user, bookId=book.id, status="READING", currentPage=150, totalPages=300)
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["progressPercentage"] == 50.0
    assert data["status"] == "READING"
    assert data["startedAt"] is not None
    assert "25 points" in r.json()["message"]
    db.refresh(user)
    assert user.points == 25

    # segundo envío por encima del 50%: sin bono repetido
    r = _post(client, headers, user, bookId=book.id, status="READING", currentPage=200)
    assert r.status_code == 200
    db.refresh(user)
    assert user.points == 25


def test_completion_sets_timestamps_and_awards_once(client, db, make_user, make_book, headers):
    user = make_user()
    book = make_book(pages=300)

    first = _post(client, headers, user, bookId=book.id, status="READING", currentPage=10).json()["data"]
    r = _post(client, headers, user, bookId=book.id, status="COMPLETED", currentPage=300)
    data = r.json()["data"]
    assert data["progressPercentage"] == 100.0
    assert data["completedAt"] is not None
    assert data["startedAt"] == first["startedAt"]
    db.refresh(user)
    assert user.points == 100

    _post(client, headers, user, bookId=book.id, status="COMPLETED", currentPage=300)
    db.refresh(user)
    assert user.points == 100


def test_leaving_completed_clears_completed_at(client, make_user, make_book, headers):
    user = make_user()
    book = make_book(pages=100)
    _post(client, headers, user, bookId=book.id, status="COMPLETED", currentPage=100)
    data = _post(client, headers, user, bookId=book.id, status="READING", currentPage=40).json()["data"]
    assert data["completedAt"] is None
    assert data["progressPercentage"] == 40.0


def test_upsert_keeps_single_row(client, db, make_user, make_book, headers):
    user = make_user()
    book = make_book()
    for page in (10, 20, 30):
        assert _post(client, headers, user, bookId=book.id, status="READING", currentPage=page).status_code == 200
    rows = db.query(ReadingProgress).filter_by(user_id=user.id, book_id=book.id).all()
    assert len(rows) == 1
    assert rows[0].current_page == 30


def test_percentage_capped_and_zero_pages(client, make_user, make_book, headers):
    user = make_user()
    capped = make_book(pages=100)
    no_pages = make_book(pages=None)
    r = _post(client, headers, user, bookId=capped.id, status="READING", currentPage=250)
    assert r.json()["data"]["progressPercentage"] == 100.0
    r = _post(client, headers, user, bookId=no_pages.id, status="READING", currentPage=40)
    assert r.json()["data"]["progressPercentage"] == 0.0


def test_missing_book_id_is_400(client, make_user, headers):
    r = _post(client, headers, make_user(), status="READING", currentPage=5)
    assert r.status_code == 400
    assert r.json() == {"error": "Book ID is required"}


def test_unknown_book_is_404(client, make_user, headers):
    r = _post(client, headers, make_user(), bookId=9999, currentPage=5)
    assert r.status_code == 404
    assert r.json()["error"] == "Book not found"


def test_negative_page_is_400(client, make_user, make_book, headers):
    r = _post(client, headers, make_user(), bookId=make_book().id, currentPage=-1)
    assert r.status_code == 400


def test_requires_authentication(client, make_book):
    r = client.post("/reading-progress", json={"bookId": make_book().id})
    assert r.status_code == 401
    assert "error" in r.json()


def test_list_filters_by_status(client, make_user, make_book, headers):
    user = make_user()
    a, b = make_book(), make_book()
    _post(client, headers, user, bookId=a.id, status="READING", currentPage=5)
    _post(client, headers, user, bookId=b.id, status="PAUSED", currentPage=5)

    r = client.get("/reading-progress", params={"status": "PAUSED"}, headers=headers(user))
    assert r.status_code == 200
    rows = r.json()["data"]
    assert [row["bookId"] for row in rows] == [b.id]
    assert rows[0]["book"]["title"] == b.title


def _failing_award(*args, **kwargs):
    raise SQLAlchemyError("points table unavailable")


def test_failed_award_rolls_back_progress(client, db, monkeypatch, make_user, make_book, headers):
    monkeypatch.setattr(progress_module, "award_points", _failing_award)
    user = make_user()
    book = make_book(pages=300)

    r = _post(client, headers, user, bookId=book.id, status="COMPLETED", currentPage=300)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to update reading progress"}

    assert db.query(ReadingProgress).count() == 0
    db.refresh(user)
    assert user.points == 0


def test_failed_award_rolls_back_summary(client, db, monkeypatch, make_user, make_book, headers):
    monkeypatch.setattr(summaries_module, "award_points", _failing_award)
    user = make_user()
    r = client.post("/summaries", json={"bookId": make_book().id, "content": "Text"}, headers=headers(user))
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create summary"}

    assert db.query(Summary).count() == 0
    db.refresh(user)
    assert user.points == 0
