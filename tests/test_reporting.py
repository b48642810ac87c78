from datetime import timedelta

import pytest

from shelfwise import InvalidInput

from conftest import T0


def test_stats_on_fresh_library(lib):
    s = lib.stats(now=T0)
    assert s.total_book_copies == 4
    assert s.issued_count == 0
    assert s.overdue_count == 0
    assert s.member_count == 2


def test_stats_count_issued_and_overdue(lib, physics, clean_code, john, jane):
    a = lib.issue_book(physics.book_id, john.member_id, now=T0).loan
    lib.issue_book(clean_code.book_id, jane.member_id, now=T0 + timedelta(days=5))
    later = T0 + timedelta(days=8)

    s = lib.stats(now=later)
    assert s.issued_count == 2
    assert s.overdue_count == 1
    assert [l.loan_id for l in lib.overdue_loans(now=later)] == [a.loan_id]

    lib.return_book(a.loan_id, now=later)
    s = lib.stats(now=later)
    assert s.issued_count == 1
    assert s.overdue_count == 0
    assert s.total_book_copies == 4


def test_loan_exactly_at_due_date_not_overdue(lib, physics, john):
    loan = lib.issue_book(physics.book_id, john.member_id, now=T0).loan
    assert lib.stats(now=loan.due_date).overdue_count == 0


def test_recent_activity_newest_first_and_capped(lib, physics, john):
    ids = [lib.issue_book(physics.book_id, john.member_id, now=T0).loan.loan_id for _ in range(3)]
    for loan_id in ids:
        lib.return_book(loan_id, now=T0)
    ids += [lib.issue_book(physics.book_id, john.member_id, now=T0).loan.loan_id for _ in range(3)]

    recent = lib.recent_activity()
    assert [l.loan_id for l in recent] == list(reversed(ids))[:5]
    assert [l.loan_id for l in lib.recent_activity(2)] == [ids[5], ids[4]]


def test_reporting_does_not_mutate(lib, physics, john):
    lib.issue_book(physics.book_id, john.member_id, now=T0)
    before = ([b.to_record() for b in lib.get_books()], [l.to_record() for l in lib.get_loans()])
    lib.stats(now=T0 + timedelta(days=30))
    lib.recent_activity()
    after = ([b.to_record() for b in lib.get_books()], [l.to_record() for l in lib.get_loans()])
    assert before == after


def test_recent_activity_zero_and_negative_limits(lib, physics, john):
    lib.issue_book(physics.book_id, john.member_id, now=T0)
    assert lib.recent_activity(0) == []
    assert len(lib.recent_activity()) == 1
    with pytest.raises(InvalidInput):
        lib.recent_activity(-1)
