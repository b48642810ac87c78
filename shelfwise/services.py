from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
import logging
import uuid

from .domain import Book, Loan, LoanStatus, Member, utcnow
from .errors import (
    AlreadyReturned,
    HasActiveLoans,
    InvalidInput,
    InvariantViolation,
    NotFound,
    Unavailable,
)
from .repositories import EntityStore

logger = logging.getLogger("shelfwise.services")

ONE_DAY = timedelta(days=1)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def _required(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{field_name} cannot be empty")
    return value.strip()


def _optional(value: Optional[str], field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidInput(f"{field_name} must be text, got {value!r}")
    return value.strip()


class CatalogService:
    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def add_book(
        self,
        title: str,
        author: str,
        isbn: str,
        category: str,
        total_copies: int,
        now: Optional[datetime] = None,
    ) -> Book:
        logger.info("add_book called | title=%s copies=%s", title, total_copies)
        # bool is an int subclass; True copies is not a count
        if isinstance(total_copies, bool) or not isinstance(total_copies, int) or total_copies < 1:
            raise InvalidInput(f"total_copies must be a positive integer, got {total_copies!r}")
        b = Book(
            book_id=_new_id("bk"),
            title=_required(title, "title"),
            author=_optional(author, "author"),
            isbn=_optional(isbn, "isbn"),
            category=_optional(category, "category"),
            total_copies=total_copies,
            available_copies=total_copies,
            added_at=now or utcnow(),
        )
        with self.store.locked():
            books = self.store.books()
            books.add(b)
            self.store.commit(books)
        logger.info("Book added | id=%s", b.book_id)
        return b

    def add_member(
        self,
        name: str,
        roll_no: str,
        department: str,
        email: str,
        now: Optional[datetime] = None,
    ) -> Member:
        logger.info("add_member called | name=%s roll_no=%s", name, roll_no)
        m = Member(
            member_id=_new_id("mbr"),
            name=_required(name, "name"),
            roll_no=_required(roll_no, "roll_no"),
            department=_required(department, "department"),
            email=_required(email, "email"),
            joined_at=now or utcnow(),
        )
        with self.store.locked():
            members = self.store.members()
            members.add(m)
            self.store.commit(members)
        logger.info("Member added | id=%s", m.member_id)
        return m

    def remove_book(self, book_id: str) -> Book:
        """
        Delete a book.

        Raises:
            NotFound: no book with this id.
            HasActiveLoans: copies of the book are still out.
        """
        with self.store.locked():
            books = self.store.books()
            book = books.get(book_id)
            if book is None:
                raise NotFound("book", book_id)
            active = self.store.loans().list_active_by_book(book_id)
            if active:
                raise HasActiveLoans(
                    f"Book {book_id} has {len(active)} copies on loan; return them first"
                )
            books.remove(book_id)
            self.store.commit(books)
        logger.info("Book removed | id=%s", book_id)
        return book

    def remove_member(self, member_id: str) -> Member:
        """
        Delete a member.

        Raises:
            NotFound: no member with this id.
            HasActiveLoans: the member still holds books.
        """
        with self.store.locked():
            members = self.store.members()
            member = members.get(member_id)
            if member is None:
                raise NotFound("member", member_id)
            active = self.store.loans().list_active_by_member(member_id)
            if active:
                raise HasActiveLoans(
                    f"Member {member_id} still holds {len(active)} books; return them first"
                )
            members.remove(member_id)
            self.store.commit(members)
        logger.info("Member removed | id=%s", member_id)
        return member

    def get_book(self, book_id: str) -> Book:
        book = self.store.books().get(book_id)
        if book is None:
            raise NotFound("book", book_id)
        return book

    def get_member(self, member_id: str) -> Member:
        member = self.store.members().get(member_id)
        if member is None:
            raise NotFound("member", member_id)
        return member

    def search_books(self, text: str) -> List[Book]:
        return self.store.books().search(text)

    def search_members(self, text: str) -> List[Member]:
        return self.store.members().search(text)

    def available_books(self) -> List[Book]:
        return self.store.books().list_available()


class FineService:
    def __init__(self, fine_per_day: int = 1) -> None:
        self.fine_per_day = fine_per_day

    @staticmethod
    def overdue_days(due_date: datetime, returned_at: datetime) -> int:
        """Whole days late, rounding any started day up; 0 when on time."""
        if returned_at <= due_date:
            return 0
        days, rest = divmod(returned_at - due_date, ONE_DAY)
        return days + 1 if rest else days

    def assess(self, loan: Loan, returned_at: datetime) -> int:
        return self.overdue_days(loan.due_date, returned_at) * self.fine_per_day


class CirculationService:
    def __init__(
        self,
        store: EntityStore,
        fines: FineService,
        loan_period_days: int = 7,
    ) -> None:
        self.store = store
        self.fines = fines
        self.loan_period = timedelta(days=loan_period_days)

    def issue(self, book_id: str, member_id: str, now: Optional[datetime] = None) -> Loan:
        """
        Lend one copy of a book to a member.

        Raises:
            NotFound: unknown book or member.
            Unavailable: every copy is out.
        """
        logger.info("issue called | book=%s member=%s", book_id, member_id)
        now = now or utcnow()
        with self.store.locked():
            books = self.store.books()
            book = books.get(book_id)
            if book is None:
                raise NotFound("book", book_id)
            if book.available_copies <= 0:
                raise Unavailable(f"No copies of '{book.title}' are available")
            if self.store.members().get(member_id) is None:
                raise NotFound("member", member_id)

            loans = self.store.loans()
            loan = Loan(
                loan_id=_new_id("loan"),
                book_id=book_id,
                member_id=member_id,
                issue_date=now,
                due_date=now + self.loan_period,
            )
            book.available_copies -= 1
            loans.add(loan)
            # books first: a crash before the loan is saved leaves one copy
            # unaccounted for (reconcile() restores it), never one issued twice
            self.store.commit(books, loans)
        logger.info("Book issued | loan=%s due=%s", loan.loan_id, loan.due_date.isoformat())
        return loan

    def return_loan(self, loan_id: str, now: Optional[datetime] = None) -> Loan:
        """
        Close a loan, assess its fine and put the copy back on the shelf.

        Raises:
            NotFound: unknown loan.
            AlreadyReturned: the loan is closed.
            InvariantViolation: the copy count cannot take the copy back.
        """
        logger.info("return called | loan=%s", loan_id)
        now = now or utcnow()
        with self.store.locked():
            loans = self.store.loans()
            loan = loans.get(loan_id)
            if loan is None:
                raise NotFound("loan", loan_id)
            if loan.status is LoanStatus.RETURNED:
                raise AlreadyReturned(f"Loan {loan_id} was already returned")

            books = self.store.books()
            book = books.get(loan.book_id)
            if book is None:
                logger.error("Loan references a missing book | loan=%s book=%s", loan_id, loan.book_id)
                raise InvariantViolation(f"Loan {loan_id} references missing book {loan.book_id}")
            if book.available_copies + 1 > book.total_copies:
                logger.error(
                    "Copy count would exceed total | book=%s available=%d total=%d",
                    book.book_id,
                    book.available_copies,
                    book.total_copies,
                )
                raise InvariantViolation(
                    f"Book {book.book_id} already has all {book.total_copies} copies on the shelf"
                )

            loan.mark_returned(now, self.fines.assess(loan, now))
            book.available_copies += 1
            # loan first: a crash before the book is saved understates availability
            self.store.commit(loans, books)
        logger.info("Book returned | loan=%s fine=%d", loan_id, loan.fine)
        return loan

    def get_loan(self, loan_id: str) -> Loan:
        loan = self.store.loans().get(loan_id)
        if loan is None:
            raise NotFound("loan", loan_id)
        return loan

    def list_active_loans(self) -> List[Loan]:
        return self.store.loans().list_active()

    def list_overdue_loans(self, now: Optional[datetime] = None) -> List[Loan]:
        return self.store.loans().list_overdue(now or utcnow())

    def _drift(self, books, loans) -> Dict[str, Tuple[int, int]]:
        on_loan = loans.count_active_by_book()
        drift: Dict[str, Tuple[int, int]] = {}
        for b in books.list_all():
            derived = b.total_copies - on_loan.get(b.book_id, 0)
            if b.available_copies != derived:
                drift[b.book_id] = (b.available_copies, derived)
        return drift

    def check_consistency(self) -> Dict[str, Tuple[int, int]]:
        """Map of book_id -> (stored, derived) for every book whose counter drifted."""
        with self.store.locked():
            return self._drift(self.store.books(), self.store.loans())

    def reconcile(self) -> Dict[str, Tuple[int, int]]:
        """
        Rewrite drifted availability counters from the ISSUED loans.

        A negative derived value means more loans are out than copies exist;
        that cannot be repaired by counting and is raised instead.
        """
        with self.store.locked():
            books = self.store.books()
            drift = self._drift(books, self.store.loans())
            if not drift:
                return drift
            for book_id, (stored, derived) in drift.items():
                if derived < 0:
                    logger.error("More loans than copies | book=%s derived=%d", book_id, derived)
                    raise InvariantViolation(f"Book {book_id} has more active loans than copies")
                logger.warning("Repairing availability | book=%s stored=%d derived=%d", book_id, stored, derived)
                books.get(book_id).available_copies = derived
            self.store.commit(books)
        return drift


@dataclass(frozen=True)
class LibraryStats:
    total_book_copies: int
    issued_count: int
    overdue_count: int
    member_count: int


class ReportingService:
    """Read-only projections over the current collections."""

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def stats(self, now: Optional[datetime] = None) -> LibraryStats:
        now = now or utcnow()
        with self.store.locked():
            books = self.store.books()
            loans = self.store.loans()
            members = self.store.members()
        return LibraryStats(
            total_book_copies=sum(b.total_copies for b in books.list_all()),
            issued_count=len(loans.list_active()),
            overdue_count=len(loans.list_overdue(now)),
            member_count=len(members),
        )

    def recent_activity(self, limit: int = 5) -> List[Loan]:
        if limit < 0:
            raise InvalidInput(f"limit cannot be negative, got {limit}")
        # loans are append-only, so storage order is creation order
        loans = self.store.loans().list_all()
        return list(reversed(loans))[:limit]
