"""Model serialization for API responses."""

from typing import Any, Iterable

from messuopas.roles import get_role_label_fi
from messuopas.services.preferences.resolver import ResolvedSection


def serialize_model(obj: Any) -> dict[str, Any]:
    """
    Serialize a SQLAlchemy model's columns to a dictionary.

    Args:
        obj: SQLAlchemy model instance

    Returns:
        Dictionary representation of the model
    """
    result = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.key)
        if hasattr(value, "isoformat"):  # datetime
            result[column.key] = value.isoformat()
        else:
            result[column.key] = value
    return result


def serialize_models(objs: Iterable[Any]) -> list[dict[str, Any]]:
    return [serialize_model(obj) for obj in objs]


def serialize_section(section: Any) -> dict[str, Any]:
    """Serialize a section document with its subsections in stored order."""
    result = serialize_model(section)
    result["subsections"] = serialize_models(
        sorted(section.subsections, key=lambda sub: sub.order or 0)
    )
    return result


def serialize_user(user: Any) -> dict[str, Any]:
    result = serialize_model(user)
    result["role_label"] = get_role_label_fi(user.role)
    return result


def serialize_resolved(sections: Iterable[ResolvedSection]) -> list[dict[str, Any]]:
    """
    Serialize a resolved section view.

    Subsection ``active`` is reported as resolved, so a flag that was never
    set shows as false until a preference is written.
    """
    return [
        {
            "id": section.id,
            "type": section.kind.value,
            "title": section.title,
            "path": section.path,
            "order": index,
            "active": section.active,
            "displayable": section.displayable,
            "event_id": section.event_id,
            "subsections": [
                {
                    "id": sub.id,
                    "title": sub.title,
                    "path": sub.path,
                    "order": sub_index,
                    "active": sub.is_active,
                }
                for sub_index, sub in enumerate(section.subsections)
            ],
        }
        for index, section in enumerate(sections)
    ]
