from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .assistant import LibrarianAssistant, Responder
from .config import LibraryConfig
from .domain import Book, Loan, Member
from .errors import LibraryError
from .repositories import EntityStore
from .services import (
    CatalogService,
    CirculationService,
    FineService,
    LibraryStats,
    ReportingService,
)
from .storage import JsonFileStorage, MemoryStorage, Storage

ASSISTANT_OFFLINE = "The librarian assistant is not configured."


@dataclass
class Outcome:
    """Result of a circulation operation, ready to show to the operator."""
    success: bool
    message: str
    error: Optional[str] = None
    loan: Optional[Loan] = None
    fine: Optional[int] = None


class LibrarySystem:
    """
    A simple facade that wires the store + services and offers a compact API.
    """

    def __init__(
        self,
        config: Optional[LibraryConfig] = None,
        storage: Optional[Storage] = None,
    ) -> None:
        self.config = config or LibraryConfig()
        if storage is None:
            if self.config.data_dir:
                storage = JsonFileStorage(self.config.data_dir)
            else:
                storage = MemoryStorage()

        self.store = EntityStore(storage)

        # services
        self.catalog = CatalogService(self.store)
        self.fine_service = FineService(self.config.fine_per_day)
        self.circulation = CirculationService(
            self.store, self.fine_service, self.config.loan_period_days
        )
        self.reporting = ReportingService(self.store)
        self.assistant: Optional[LibrarianAssistant] = None

    # ---- catalog module
    def add_book(
        self, title: str, author: str, isbn: str, category: str, total_copies: int
    ) -> Book:
        return self.catalog.add_book(title, author, isbn, category, total_copies)

    def add_member(self, name: str, roll_no: str, department: str, email: str) -> Member:
        return self.catalog.add_member(name, roll_no, department, email)

    def remove_book(self, book_id: str) -> Book:
        return self.catalog.remove_book(book_id)

    def remove_member(self, member_id: str) -> Member:
        return self.catalog.remove_member(member_id)

    def search_books(self, text: str) -> List[Book]:
        return self.catalog.search_books(text)

    def search_members(self, text: str) -> List[Member]:
        return self.catalog.search_members(text)

    def available_books(self) -> List[Book]:
        return self.catalog.available_books()

    # ---- circulation module
    def issue_book(
        self, book_id: str, member_id: str, now: Optional[datetime] = None
    ) -> Outcome:
        try:
            loan = self.circulation.issue(book_id, member_id, now)
        except LibraryError as e:
            return Outcome(False, str(e), error=e.code)
        return Outcome(True, "Book issued successfully", loan=loan)

    def return_book(self, loan_id: str, now: Optional[datetime] = None) -> Outcome:
        try:
            loan = self.circulation.return_loan(loan_id, now)
        except LibraryError as e:
            return Outcome(False, str(e), error=e.code)
        return Outcome(True, f"Book returned. Fine: {loan.fine}", loan=loan, fine=loan.fine)

    def active_loans(self) -> List[Loan]:
        return self.circulation.list_active_loans()

    def overdue_loans(self, now: Optional[datetime] = None) -> List[Loan]:
        return self.circulation.list_overdue_loans(now)

    def reconcile(self) -> Dict[str, Tuple[int, int]]:
        return self.circulation.reconcile()

    # ---- queries (fresh copies; editing them changes nothing)
    def get_books(self) -> List[Book]:
        return self.store.books().list_all()

    def get_members(self) -> List[Member]:
        return self.store.members().list_all()

    def get_loans(self) -> List[Loan]:
        return self.store.loans().list_all()

    # ---- reporting
    def stats(self, now: Optional[datetime] = None) -> LibraryStats:
        return self.reporting.stats(now)

    def recent_activity(self, limit: Optional[int] = None) -> List[Loan]:
        return self.reporting.recent_activity(self.config.recent_window if limit is None else limit)

    # ---- assistant
    def attach_assistant(self, responder: Responder) -> LibrarianAssistant:
        self.assistant = LibrarianAssistant(responder, self.get_books)
        return self.assistant

    def ask_librarian(self, query: str) -> str:
        if self.assistant is None:
            return ASSISTANT_OFFLINE
        return self.assistant.ask(query)
