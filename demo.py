from __future__ import annotations
from datetime import timedelta

from shelfwise import LibraryConfig, LibrarySystem, configure_logging, seed_demo_data


def demo_flow() -> None:
    configure_logging()
    sys = LibrarySystem(LibraryConfig.from_env())
    seed_demo_data(sys)

    # Search
    print("\n[demo] search 'physics':", [b.title for b in sys.search_books("physics")])

    # Issue the last copies of Gatsby, then one too many
    gatsby = next(b for b in sys.get_books() if b.title == "The Great Gatsby")
    john, jane = sys.get_members()[:2]
    first = sys.issue_book(gatsby.book_id, john.member_id)
    second = sys.issue_book(gatsby.book_id, jane.member_id)
    third = sys.issue_book(gatsby.book_id, jane.member_id)
    print("\n[demo] issues:", [o.message for o in (first, second, third)])

    # Return one on time and one late
    if first.loan:
        print("[demo]", sys.return_book(first.loan.loan_id).message)
    if second.loan:
        late = second.loan.due_date + timedelta(days=2, hours=3)
        print("[demo]", sys.return_book(second.loan.loan_id, now=late).message)
        print("[demo] again:", sys.return_book(second.loan.loan_id).message)

    # Dashboard
    print("\n[demo] stats:", sys.stats())
    print("[demo] recent:", [(l.loan_id[:13], l.status.value) for l in sys.recent_activity()])
    print("[demo] assistant:", sys.ask_librarian("Do you have Clean Code?"))


if __name__ == "__main__":
    demo_flow()
