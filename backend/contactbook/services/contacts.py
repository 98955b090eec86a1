"""Contact store: filtered, sorted, paginated listing and single-row writes."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from ..core.observability import track_contact_mutation
from ..models.contact import EMAIL_UNIQUE_CONSTRAINT, Contact
from ..schemas import ContactCreate, ContactUpdate


logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("first_name", "last_name", "email", "created_at", "updated_at")
DEFAULT_SORT_COLUMN = "last_name"


def normalize_sort(column: Optional[str], direction: Optional[str]) -> Tuple[str, str]:
    """Clamp a sort request to the allow-list.

    Unknown columns fall back to last_name; anything but "desc"
    (case-insensitive) sorts ascending.
    """
    safe_column = column if column in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN
    safe_direction = "desc" if (direction or "").strip().lower() == "desc" else "asc"
    return safe_column, safe_direction


def parse_sort(sort: Optional[str]) -> Tuple[str, str]:
    """Split the wire format "column:direction" and normalize both halves."""
    column, _, direction = (sort or "").partition(":")
    return normalize_sort(column.strip(), direction)


def _is_email_conflict(exc: IntegrityError) -> bool:
    # SQLite names the column, PostgreSQL and MySQL name the constraint
    message = str(exc.orig)
    return EMAIL_UNIQUE_CONSTRAINT in message or "contacts.email" in message


class ContactStore:
    """Store for contact rows.

    Input arrives already validated by the request schemas; this class only
    enforces what the database enforces (email uniqueness) and translates
    storage failures into the API error taxonomy.
    """

    def __init__(self, db: Session):
        self.db = db

    def list(
        self,
        search: Optional[str] = "",
        page: int = 1,
        page_size: int = 10,
        sort_column: Optional[str] = DEFAULT_SORT_COLUMN,
        sort_direction: Optional[str] = "asc",
    ) -> Tuple[List[Contact], int]:
        """Return one page of matching contacts and the total match count.

        Args:
            search: Case-insensitive substring matched against first name,
                last name or email. Empty matches everything.
            page: 1-indexed page number
            page_size: Rows per page. Not capped.
            sort_column: One of SORTABLE_COLUMNS, anything else means last_name
            sort_direction: "desc" for descending, anything else ascending

        Returns:
            (rows, total) where total ignores pagination
        """
        if page < 1 or page_size < 1:
            raise ValidationError(
                fields={
                    name: ["must be greater than or equal to 1"]
                    for name, value in (("page", page), ("pageSize", page_size))
                    if value < 1
                }
            )

        column, direction = normalize_sort(sort_column, sort_direction)
        term = (search or "").strip()

        query = select(Contact)
        count_query = select(func.count()).select_from(Contact)
        if term:
            condition = or_(
                Contact.first_name.icontains(term, autoescape=True),
                Contact.last_name.icontains(term, autoescape=True),
                Contact.email.icontains(term, autoescape=True),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        order_column = getattr(Contact, column)
        ordering = order_column.desc() if direction == "desc" else order_column.asc()

        total = self.db.scalar(count_query) or 0
        rows = self.db.scalars(
            query.order_by(ordering, Contact.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()

        logger.debug(
            "Listed contacts search=%r page=%d size=%d sort=%s:%s -> %d of %d",
            term, page, page_size, column, direction, len(rows), total,
        )
        return [*rows], total

    def get(self, contact_id: int) -> Contact:
        contact = self.db.get(Contact, contact_id)
        if contact is None:
            raise NotFoundError(f"Contact {contact_id} not found")
        return contact

    def create(self, fields: ContactCreate) -> Contact:
        """Insert a contact. Raises ConflictError when the email is taken."""
        contact = Contact(**fields.model_dump())
        self.db.add(contact)
        self._commit("create")
        self.db.refresh(contact)

        track_contact_mutation("create")
        logger.info(f"Created contact {contact.id}")
        return contact

    def update(self, contact_id: int, fields: ContactUpdate) -> Contact:
        """Merge the supplied fields onto an existing contact.

        Fields absent from the payload keep their stored values. The
        read-modify-write is not isolated: concurrent updates to the same row
        are last-writer-wins.
        """
        contact = self.get(contact_id)

        changes = fields.model_dump(exclude_unset=True)
        for name, value in changes.items():
            setattr(contact, name, value)
        contact.touch()

        self._commit("update")
        self.db.refresh(contact)

        track_contact_mutation("update")
        logger.info(f"Updated contact {contact_id} fields={sorted(changes)}")
        return contact

    def delete(self, contact_id: int) -> None:
        contact = self.get(contact_id)
        self.db.delete(contact)
        self._commit("delete")

        track_contact_mutation("delete")
        logger.info(f"Deleted contact {contact_id}")

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Contact)) or 0

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_email_conflict(exc):
                logger.info(f"Contact {action} rejected: duplicate email")
                raise ConflictError("Email already exists") from exc
            logger.error(f"Contact {action} violated a constraint: {exc.orig}")
            raise InternalError(f"Contact {action} failed") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Contact {action} failed: {exc}")
            raise InternalError(f"Contact {action} failed") from exc
