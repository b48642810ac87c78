from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from .domain import Book, Loan, LoanStatus, Member
from .storage import BOOKS, LOANS, MEMBERS, Storage

logger = logging.getLogger("shelfwise.store")

T = TypeVar("T", Book, Member, Loan)


class _Repo(Generic[T]):
    """Ordered, id-indexed working copy of one collection."""

    collection: str = ""

    def __init__(self, items: List[T], key: Callable[[T], str]) -> None:
        self._key = key
        self._items: Dict[str, T] = {key(i): i for i in items}

    def add(self, item: T) -> None:
        self._items[self._key(item)] = item

    def get(self, ident: str) -> Optional[T]:
        return self._items.get(ident)

    def remove(self, ident: str) -> Optional[T]:
        return self._items.pop(ident, None)

    def list_all(self) -> List[T]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def to_records(self) -> List[dict]:
        return [i.to_record() for i in self._items.values()]


class BookRepo(_Repo[Book]):
    collection = BOOKS

    def __init__(self, books: List[Book]) -> None:
        super().__init__(books, key=lambda b: b.book_id)

    def search(self, text: str) -> List[Book]:
        t = text.lower().strip()

        def matches(b: Book) -> bool:
            return t in b.title.lower() or t in b.author.lower() or t in b.category.lower()

        return [b for b in self._items.values() if matches(b)]

    def list_available(self) -> List[Book]:
        return [b for b in self._items.values() if b.available_copies > 0]


class MemberRepo(_Repo[Member]):
    collection = MEMBERS

    def __init__(self, members: List[Member]) -> None:
        super().__init__(members, key=lambda m: m.member_id)

    def search(self, text: str) -> List[Member]:
        t = text.lower().strip()
        return [
            m
            for m in self._items.values()
            if t in m.name.lower() or t in m.roll_no.lower()
        ]


class LoanRepo(_Repo[Loan]):
    collection = LOANS

    def __init__(self, loans: List[Loan]) -> None:
        super().__init__(loans, key=lambda l: l.loan_id)

    def list_active(self) -> List[Loan]:
        return [l for l in self._items.values() if l.status is LoanStatus.ISSUED]

    def list_active_by_book(self, book_id: str) -> List[Loan]:
        return [l for l in self.list_active() if l.book_id == book_id]

    def list_active_by_member(self, member_id: str) -> List[Loan]:
        return [l for l in self.list_active() if l.member_id == member_id]

    def list_overdue(self, now: Optional[datetime] = None) -> List[Loan]:
        return [l for l in self._items.values() if l.is_overdue(now)]

    def count_active_by_book(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for l in self.list_active():
            counts[l.book_id] = counts.get(l.book_id, 0) + 1
        return counts


class EntityStore:
    """
    The single owner of the book, member and loan collections.

    Every load hands out fresh objects, so callers mutate private working
    copies and nothing is visible to others until ``commit``.  Mutating
    operations run inside ``locked()``, one critical section guarding all
    three collections.
    """

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["EntityStore"]:
        with self._lock:
            yield self

    def books(self) -> BookRepo:
        return BookRepo([Book.from_record(r) for r in self.storage.load(BOOKS)])

    def members(self) -> MemberRepo:
        return MemberRepo([Member.from_record(r) for r in self.storage.load(MEMBERS)])

    def loans(self) -> LoanRepo:
        return LoanRepo([Loan.from_record(r) for r in self.storage.load(LOANS)])

    def commit(self, *repos: _Repo) -> None:
        """
        Save each repo's collection, strictly in the given order.

        The storage only guarantees atomicity per collection, so callers
        choose the order that leaves the data safe if the process dies
        between two saves.
        """
        with self._lock:
            for repo in repos:
                self.storage.save(repo.collection, repo.to_records())
            logger.debug("Commit done | collections=%s", [r.collection for r in repos])
