"""Catalog validation logic."""

import re
import unicodedata

from messuopas.exceptions import ValidationError


def slugify(title: str) -> str:
    """Derive a URL path segment from a title ("Messun jälkeen" -> "messun-jalkeen")."""
    ascii_title = (
        unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_title.lower()).strip("-")
    return slug or "osio"


class CatalogValidator:
    """Validates section and subsection data according to business rules."""

    # Validation constants
    TITLE_MIN_LENGTH = 1
    TITLE_MAX_LENGTH = 500
    ID_MAX_LENGTH = 255

    @staticmethod
    def validate_title(title: str) -> None:
        """
        Validate a section or subsection title.

        Args:
            title: Title to validate

        Raises:
            ValidationError: If title is invalid
        """
        if not isinstance(title, str):
            raise ValidationError("Title must be a string", "title")
        if not title or not title.strip():
            raise ValidationError("Title is required and cannot be empty", "title")
        if len(title) > CatalogValidator.TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {CatalogValidator.TITLE_MAX_LENGTH} characters", "title"
            )

    @staticmethod
    def validate_id(item_id: str, field: str = "id") -> None:
        """
        Validate a document ID.

        Raises:
            ValidationError: If the ID is invalid
        """
        if not isinstance(item_id, str):
            raise ValidationError("ID must be a string", field)
        if not item_id or not item_id.strip():
            raise ValidationError("ID cannot be empty", field)
        if len(item_id) > CatalogValidator.ID_MAX_LENGTH:
            raise ValidationError(
                f"ID must be at most {CatalogValidator.ID_MAX_LENGTH} characters", field
            )

    @staticmethod
    def validate_html(html: str) -> None:
        """Validate rich-text subsection content."""
        if not isinstance(html, str):
            raise ValidationError("Content must be a string", "html")

    @staticmethod
    def validate_order(order: int) -> None:
        """Validate a display order value."""
        if isinstance(order, bool) or not isinstance(order, int):
            raise ValidationError("Order must be an integer", "order")
        if order < 0:
            raise ValidationError("Order must be non-negative", "order")

    @staticmethod
    def validate_id_order(ordered_ids: list[str], field: str = "ordered_ids") -> None:
        """Validate a list of IDs describing a new sibling order."""
        if not isinstance(ordered_ids, list) or not ordered_ids:
            raise ValidationError(f"{field} must be a non-empty list", field)
        for item_id in ordered_ids:
            CatalogValidator.validate_id(item_id, field)
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValidationError(f"{field} contains duplicate IDs", field)
