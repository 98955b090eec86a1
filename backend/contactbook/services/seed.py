"""Demo data inserted on first start so the contact table is not empty."""
import logging

from sqlalchemy.orm import Session

from ..models.contact import Contact
from .contacts import ContactStore


logger = logging.getLogger(__name__)

DEMO_CONTACTS = [
    ("Ada", "Lovelace", "ada.lovelace@example.com", "555-0101", "Analytical Engines"),
    ("Alan", "Turing", "alan.turing@example.com", "555-0102", "Bletchley Park"),
    ("Grace", "Hopper", "grace.hopper@example.com", "555-0103", "US Navy"),
    ("Katherine", "Johnson", "katherine.johnson@example.com", None, "NASA"),
    ("Linus", "Torvalds", "linus@example.org", None, "Linux Foundation"),
    ("Margaret", "Hamilton", "margaret.hamilton@example.com", "555-0106", "MIT"),
    ("John", "Smith", "john.smith@example.com", "555-0107", None),
    ("Jane", "Smithson", "jane.smithson@example.com", None, "Acme Corp"),
    ("Edsger", "Dijkstra", "edsger@example.nl", None, "Eindhoven University"),
    ("Barbara", "Liskov", "barbara.liskov@example.com", "555-0110", "MIT"),
    ("Donald", "Knuth", "knuth@example.edu", None, "Stanford"),
    ("Frances", "Allen", "frances.allen@example.com", None, "IBM"),
]


def seed_demo_contacts(db: Session) -> int:
    """Insert DEMO_CONTACTS when the contact table is empty.

    Returns:
        Number of contacts inserted (0 when data already exists)
    """
    if ContactStore(db).count():
        logger.info("Contacts present, skipping demo seed")
        return 0

    db.add_all(
        Contact(first_name=first, last_name=last, email=email, phone=phone, company=company)
        for first, last, email, phone, company in DEMO_CONTACTS
    )
    db.commit()
    logger.info(f"Seeded {len(DEMO_CONTACTS)} demo contacts")
    return len(DEMO_CONTACTS)
