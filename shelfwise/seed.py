from __future__ import annotations
import logging
from typing import List, Tuple

from .api import LibrarySystem
from .domain import Book, Member

logger = logging.getLogger("shelfwise.seed")

DEMO_BOOKS = [
    ("Introduction to Algorithms", "Cormen, Leiserson", "9780262033848", "Computer Science", 5),
    ("Clean Code", "Robert C. Martin", "9780132350884", "Software Engineering", 3),
    ("The Great Gatsby", "F. Scott Fitzgerald", "9780743273565", "Fiction", 2),
    ("University Physics", "Young and Freedman", "9780321696861", "Physics", 8),
]

DEMO_MEMBERS = [
    ("John Doe", "CS101", "Computer Science", "john@college.edu"),
    ("Jane Smith", "PH202", "Physics", "jane@college.edu"),
]


def seed_demo_data(sys: LibrarySystem) -> Tuple[List[Book], List[Member]]:
    """Fill empty collections with a small demo catalog; leaves existing data alone."""
    books: List[Book] = []
    members: List[Member] = []
    if not sys.get_books():
        books = [sys.add_book(*row) for row in DEMO_BOOKS]
    if not sys.get_members():
        members = [sys.add_member(*row) for row in DEMO_MEMBERS]

    logger.info("Seeded demo data | books=%d members=%d", len(books), len(members))
    return books, members
