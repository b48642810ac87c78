import pytest
from datetime import datetime, timezone

from shelfwise import LibrarySystem, MemoryStorage

T0 = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


class FlakyStorage(MemoryStorage):
    """Memory storage that dies when told to save one particular collection."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_on = None

    def save(self, collection, records):
        if collection == self.fail_on:
            raise RuntimeError(f"disk gone while saving {collection}")
        super().save(collection, records)


@pytest.fixture
def storage():
    return FlakyStorage()


@pytest.fixture
def lib(storage):
    """Fresh library with two books and two members."""
    l = LibrarySystem(storage=storage)
    l.add_book("Clean Code", "Robert C. Martin", "9780132350884", "Software Engineering", 1)
    l.add_book("University Physics", "Young and Freedman", "9780321696861", "Physics", 3)
    l.add_member("John Doe", "CS101", "Computer Science", "john@college.edu")
    l.add_member("Jane Smith", "PH202", "Physics", "jane@college.edu")
    return l


@pytest.fixture
def clean_code(lib):
    return next(b for b in lib.get_books() if b.title == "Clean Code")


@pytest.fixture
def physics(lib):
    return next(b for b in lib.get_books() if b.title == "University Physics")


@pytest.fixture
def john(lib):
    return next(m for m in lib.get_members() if m.roll_no == "CS101")


@pytest.fixture
def jane(lib):
    return next(m for m in lib.get_members() if m.roll_no == "PH202")


def assert_conserved(lib):
    """available + ISSUED loans == total for every book."""
    active = lib.active_loans()
    for b in lib.get_books():
        out = sum(1 for l in active if l.book_id == b.book_id)
        assert b.available_copies + out == b.total_copies, b.title
