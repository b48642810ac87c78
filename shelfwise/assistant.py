"""
Read-only "AI librarian" boundary.

The assistant answers free-text questions about the collection by handing a
text rendering of the catalog to an external text-generation service.  It
only ever sees a copied snapshot of the books, never the store, and any
failure of the service is turned into a polite fallback answer.
"""

from __future__ import annotations
import copy
import logging
from typing import Callable, List

from .domain import Book
from .errors import InvalidInput

logger = logging.getLogger("shelfwise.assistant")

# (system_prompt, user_query) -> reply text
Responder = Callable[[str, str], str]

FALLBACK_REPLY = "Sorry, I'm having trouble connecting to the knowledge base right now."
EMPTY_REPLY = "I couldn't process that request."

PROMPT_TEMPLATE = """You are a helpful and knowledgeable librarian for a college library.
Here is the current library catalog:
{catalog}

Rules:
1. If asked about availability, check the catalog data.
2. Suggest books based on the catalog if possible, or general knowledge if we don't have it but recommend requesting it.
3. Be polite and academic.
4. Keep answers concise."""


def catalog_context(books: List[Book]) -> str:
    return "\n".join(
        f"Title: {b.title}, Author: {b.author}, Category: {b.category}, "
        f"ISBN: {b.isbn}, Available: {b.available_copies}"
        for b in books
    )


class LibrarianAssistant:
    def __init__(self, responder: Responder, snapshot: Callable[[], List[Book]]) -> None:
        self.responder = responder
        self.snapshot = snapshot

    def build_prompt(self) -> str:
        books = copy.deepcopy(self.snapshot())
        return PROMPT_TEMPLATE.format(catalog=catalog_context(books))

    def ask(self, query: str) -> str:
        if not query or not query.strip():
            raise InvalidInput("query cannot be empty")
        prompt = self.build_prompt()
        try:
            reply = self.responder(prompt, query.strip())
        except Exception:
            logger.exception("Assistant backend failed")
            return FALLBACK_REPLY
        return reply or EMPTY_REPLY
