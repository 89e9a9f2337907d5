"""
Populate an empty database with demo users, profiles and an inbox.

Usage:
  ENABLE_DEMO_SEED=true DEMO_PASSWORD="<password>" python -m skillmarket.scripts.seed_demo
"""

import os
import sys
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.utils.security import get_password_hash

DEMO_EMAIL_DOMAIN = "demo.skillmarket.dev"
CURRENT_USER_KEY = "current-user"

DEMO_PROFILES = {
    CURRENT_USER_KEY: {
        "name": "Current User", "location": "Boston, MA", "availability": "evenings",
        "skills_offered": ["React", "TypeScript", "Machine Learning"],
        "skills_wanted": ["Node.js", "DevOps", "Frontend Development"],
    },
    "marc": {
        "name": "Marc Demo", "location": "Austin, TX", "availability": "weekends",
        "skills_offered": ["JavaScript"], "skills_wanted": ["React"],
    },
    "sarah": {
        "name": "Sarah Johnson", "location": "Seattle, WA", "availability": "weekdays",
        "skills_offered": ["Python", "Data Analysis"], "skills_wanted": ["Machine Learning"],
    },
    "alex": {
        "name": "Alex Chen", "location": "San Francisco, CA", "availability": "flexible",
        "skills_offered": ["Design", "Figma"], "skills_wanted": ["Frontend Development"],
    },
    "emma": {
        "name": "Emma Wilson", "location": "Chicago, IL", "availability": "evenings",
        "skills_offered": ["Node.js", "PostgreSQL"], "skills_wanted": ["React"],
    },
    "david": {
        "name": "David Kim", "location": "Denver, CO", "availability": "weekends",
        "skills_offered": ["DevOps", "Docker"], "skills_wanted": ["TypeScript"],
    },
}

# (requester, recipient, offered, wanted, message, status, created_at, updated_at)
DEMO_REQUESTS = [
    ("marc", CURRENT_USER_KEY, "JavaScript", "React",
     "Hi! I'd love to learn React from you and can teach JavaScript in return.",
     "pending", "2024-01-15T10:30:00", "2024-01-15T10:30:00"),
    ("sarah", CURRENT_USER_KEY, "Python", "Machine Learning",
     "I'm experienced in Python and would love to learn ML techniques from you!",
     "pending", "2024-01-14T15:45:00", "2024-01-14T15:45:00"),
    ("alex", CURRENT_USER_KEY, "Design", "Frontend Development",
     "I can help with UI/UX design and want to improve my frontend skills.",
     "rejected", "2024-01-13T09:20:00", "2024-01-13T11:30:00"),
    (CURRENT_USER_KEY, "emma", "React", "Node.js",
     "I'd like to learn backend development with Node.js and can teach React.",
     "accepted", "2024-01-12T14:15:00", "2024-01-12T16:20:00"),
    (CURRENT_USER_KEY, "david", "TypeScript", "DevOps",
     "Looking to learn DevOps practices and can share TypeScript knowledge.",
     "pending", "2024-01-11T11:00:00", "2024-01-11T11:00:00"),
]


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def seed_demo_data(db: Session, password: str) -> Dict[str, int]:
    """Insert the demo data set; refuses to run against a non-empty database."""
    if db.query(models.User.id).first() is not None:
        raise ValueError("Demo seed blocked: the users table is not empty.")

    password_hash = get_password_hash(password)
    users: Dict[str, models.User] = {}
    for key, data in DEMO_PROFILES.items():
        user = models.User(
            full_name=data["name"],
            email=f"{key}@{DEMO_EMAIL_DOMAIN}",
            password_hash=password_hash,
            email_verified=True,
            is_active=True,
        )
        db.add(user)
        db.flush()
        db.add(models.Profile(id=user.id, profile_visibility="public", **data))
        users[key] = user

    for requester, recipient, offered, wanted, message, status, created, updated in DEMO_REQUESTS:
        db.add(models.SwapRequest(
            requester_id=users[requester].id,
            recipient_id=users[recipient].id,
            requester_name=users[requester].full_name,
            recipient_name=users[recipient].full_name,
            offered_skill=offered,
            wanted_skill=wanted,
            message=message,
            status=status,
            created_at=datetime.fromisoformat(created),
            updated_at=datetime.fromisoformat(updated),
        ))

    db.commit()
    return {"users": len(users), "requests": len(DEMO_REQUESTS)}


def main() -> int:
    try:
        if not _is_truthy(os.getenv("ENABLE_DEMO_SEED")):
            raise ValueError("Demo seed disabled. Set ENABLE_DEMO_SEED=true to run.")
        password = os.getenv("DEMO_PASSWORD", "").strip()
        if len(password) < 8:
            raise ValueError("DEMO_PASSWORD must be at least 8 characters.")

        from skillmarket.database import Base, SessionLocal, engine

        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            counts = seed_demo_data(db, password)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    except Exception as exc:
        print(f"Demo seed failed: {exc}", file=sys.stderr)
        return 1

    print(f"Seeded {counts['users']} users and {counts['requests']} requests "
          f"(sign in as {CURRENT_USER_KEY}@{DEMO_EMAIL_DOMAIN}).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
