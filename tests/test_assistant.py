import pytest

from shelfwise import InvalidInput
from shelfwise.api import ASSISTANT_OFFLINE
from shelfwise.assistant import EMPTY_REPLY, FALLBACK_REPLY, catalog_context


def test_assistant_not_configured(lib):
    assert lib.ask_librarian("anything on physics?") == ASSISTANT_OFFLINE


def test_assistant_sees_catalog_with_availability(lib, clean_code, john):
    lib.issue_book(clean_code.book_id, john.member_id)
    seen = {}

    def responder(prompt, query):
        seen["prompt"] = prompt
        seen["query"] = query
        return "We have University Physics."

    lib.attach_assistant(responder)
    assert lib.ask_librarian("  physics?  ") == "We have University Physics."
    assert seen["query"] == "physics?"
    assert "Title: Clean Code, Author: Robert C. Martin" in seen["prompt"]
    assert "ISBN: 9780132350884, Available: 0" in seen["prompt"]


def test_assistant_failure_does_not_touch_circulation(lib, clean_code, john):
    def broken(prompt, query):
        raise ConnectionError("service down")

    lib.attach_assistant(broken)
    assert lib.ask_librarian("hello") == FALLBACK_REPLY
    assert lib.issue_book(clean_code.book_id, john.member_id).success


def test_assistant_cannot_mutate_catalog(lib):
    def meddler(prompt, query):
        for b in lib.assistant.snapshot():
            b.available_copies = 0
        return ""

    lib.attach_assistant(meddler)
    assert lib.ask_librarian("hi") == EMPTY_REPLY
    assert all(b.available_copies == b.total_copies for b in lib.get_books())


def test_assistant_rejects_empty_query(lib):
    lib.attach_assistant(lambda p, q: "ok")
    with pytest.raises(InvalidInput):
        lib.ask_librarian("   ")


def test_catalog_context_one_line_per_book(lib):
    assert len(catalog_context(lib.get_books()).splitlines()) == 2
