from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    # fromisoformat only accepts a "Z" suffix from 3.11 on
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    # records written without an offset are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Book:
    book_id: str
    title: str
    author: str
    isbn: str
    category: str
    total_copies: int
    available_copies: int
    added_at: datetime = field(default_factory=utcnow)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.book_id,
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "category": self.category,
            "totalCopies": self.total_copies,
            "availableCopies": self.available_copies,
            "addedAt": _ts(self.added_at),
        }

    @classmethod
    def from_record(cls, raw: Dict[str, Any]) -> "Book":
        return cls(
            book_id=raw["id"],
            title=raw["title"],
            author=raw["author"],
            isbn=raw.get("isbn", ""),
            category=raw.get("category", ""),
            total_copies=int(raw["totalCopies"]),
            available_copies=int(raw["availableCopies"]),
            added_at=_parse_ts(raw.get("addedAt")) or utcnow(),
        )


@dataclass
class Member:
    member_id: str
    name: str
    roll_no: str
    department: str
    email: str
    joined_at: datetime = field(default_factory=utcnow)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.member_id,
            "name": self.name,
            "rollNo": self.roll_no,
            "department": self.department,
            "email": self.email,
            "joinedAt": _ts(self.joined_at),
        }

    @classmethod
    def from_record(cls, raw: Dict[str, Any]) -> "Member":
        return cls(
            member_id=raw["id"],
            name=raw["name"],
            roll_no=raw.get("rollNo", ""),
            department=raw.get("department", ""),
            email=raw.get("email", ""),
            joined_at=_parse_ts(raw.get("joinedAt")) or utcnow(),
        )


class LoanStatus(Enum):
    ISSUED = "ISSUED"
    RETURNED = "RETURNED"


@dataclass
class Loan:
    loan_id: str
    book_id: str
    member_id: str
    issue_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    status: LoanStatus = LoanStatus.ISSUED
    fine: int = 0

    @property
    def is_active(self) -> bool:
        return self.status is LoanStatus.ISSUED

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.is_active and self.due_date < now

    def mark_returned(self, when: datetime, fine: int) -> None:
        self.return_date = when
        self.status = LoanStatus.RETURNED
        self.fine = fine

    def to_record(self) -> Dict[str, Any]:
        record = {
            "id": self.loan_id,
            "bookId": self.book_id,
            "memberId": self.member_id,
            "issueDate": _ts(self.issue_date),
            "dueDate": _ts(self.due_date),
            "status": self.status.value,
            "fine": self.fine,
        }
        if self.return_date is not None:
            record["returnDate"] = _ts(self.return_date)
        return record

    @classmethod
    def from_record(cls, raw: Dict[str, Any]) -> "Loan":
        return cls(
            loan_id=raw["id"],
            book_id=raw["bookId"],
            # older records call the borrower a student
            member_id=raw.get("memberId", raw.get("studentId")),
            issue_date=_parse_ts(raw["issueDate"]),
            due_date=_parse_ts(raw["dueDate"]),
            return_date=_parse_ts(raw.get("returnDate")),
            status=LoanStatus(raw.get("status", LoanStatus.ISSUED.value)),
            fine=int(raw.get("fine", 0)),
        )
