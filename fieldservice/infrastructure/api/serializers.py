"""Domain → JSON dicts for API responses."""

from __future__ import annotations

from fieldservice.domain.entities.engineer import Engineer
from fieldservice.domain.entities.hazard import Hazard
from fieldservice.domain.entities.notification import Notification
from fieldservice.domain.entities.ticket import Ticket
from fieldservice.domain.entities.user import User
from fieldservice.domain.policies.engineer_ranking import RankedEngineer
from fieldservice.domain.value_objects.geo_point import GeoPoint


def _point(p: GeoPoint | None) -> dict | None:
    if p is None:
        return None
    return {"latitude": p.latitude, "longitude": p.longitude}


def serialize_ticket(t: Ticket) -> dict:
    return {
        "id": t.id,
        "user_email": t.user_email,
        "service_type": t.service_type.value,
        "pincode": t.pincode,
        "description": t.description,
        "location": _point(t.location),
        "address": t.address,
        "priority": t.priority.value,
        "status": t.status.value,
        "accepted": t.accepted,
        # Unassigned tickets are shown with the sentinel label, stored as NULL
        "engineer_email": t.engineer_label(),
        "created_at": t.created_at.isoformat() if t.created_at else None,
        "updated_at": t.updated_at.isoformat() if t.updated_at else None,
    }


def serialize_tickets(tickets: list[Ticket]) -> dict:
    return {"total": len(tickets), "tickets": [serialize_ticket(t) for t in tickets]}


def serialize_engineer(e: Engineer) -> dict:
    return {
        "email": e.email,
        "name": e.name,
        "phone": e.phone,
        "specialization": e.specialization.value,
        "availability": sorted(e.availability),
        "location": _point(e.location),
        "address": e.address,
        "pincode": e.pincode,
        "current_tasks": e.current_tasks,
        "assigned_tasks": list(e.assigned_tasks),
        "is_engineer": e.is_engineer,
    }


def serialize_engineers(engineers: list[Engineer]) -> dict:
    return {"total": len(engineers), "engineers": [serialize_engineer(e) for e in engineers]}


def serialize_ranked(r: RankedEngineer) -> dict:
    data = serialize_engineer(r.engineer)
    data["distance_km"] = round(r.distance_km, 3) if r.distance_km is not None else None
    return data


def serialize_eligible(data: dict) -> dict:
    return {
        "ticket": serialize_ticket(data["ticket"]),
        "weekday": data["weekday"],
        "engineers": [serialize_ranked(r) for r in data["engineers"]],
        "unlocated": [serialize_engineer(e) for e in data["unlocated"]],
    }


def serialize_hazard(h: Hazard) -> dict:
    return {
        "id": h.id,
        "hazard_type": h.hazard_type,
        "description": h.description,
        "risk_level": h.risk_level.value,
        "pincode": h.pincode,
        "location": _point(h.location),
        "address": h.address,
        "created_at": h.created_at.isoformat() if h.created_at else None,
        "updated_at": h.updated_at.isoformat() if h.updated_at else None,
    }


def serialize_hazards(hazards: list[Hazard]) -> dict:
    return {"total": len(hazards), "hazards": [serialize_hazard(h) for h in hazards]}


def serialize_user(u: User) -> dict:
    return {
        "email": u.email,
        "name": u.name,
        "phone": u.phone,
        "address": u.address,
        "pincode": u.pincode,
    }


def serialize_users(users: list[User]) -> dict:
    return {"total": len(users), "users": [serialize_user(u) for u in users]}


def serialize_profile(profile: User | Engineer) -> dict:
    if isinstance(profile, Engineer):
        return {"role": "engineer", **serialize_engineer(profile)}
    return {"role": "user", **serialize_user(profile)}


def serialize_notification(n: Notification) -> dict:
    return {
        "id": n.id,
        "email": n.email,
        "message": n.message,
        "is_read": n.is_read,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


def serialize_notifications(entries: list[Notification]) -> dict:
    return {
        "total": len(entries),
        "unread": sum(1 for n in entries if not n.is_read),
        "notifications": [serialize_notification(n) for n in entries],
    }
