"""Create tables and seed the default discussion and rating categories."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from talent_radar.db.session import SessionLocal, create_tables
from talent_radar.models import DiscussionCategory, RatingCategory

DISCUSSION_CATEGORIES = (
    ("General", "Anything about players and the game"),
    ("Transfers", "Rumours and speculation about moves"),
    ("Match Analysis", "Breakdowns of individual performances"),
    ("Rising Stars", "Young talent worth keeping an eye on"),
)

RATING_CATEGORIES = (
    ("Technical", "Ball control, passing and finishing"),
    ("Physical", "Pace, strength and stamina"),
    ("Mental", "Decision making, composure and work rate"),
    ("Potential", "Expected ceiling over the next seasons"),
)


def seed_categories(db: Session) -> int:
    """Insert any default categories that are missing and return how many were added."""
    added = 0
    existing_discussion = set(db.scalars(select(DiscussionCategory.name)))
    for order, (name, description) in enumerate(DISCUSSION_CATEGORIES):
        if name not in existing_discussion:
            db.add(DiscussionCategory(name=name, description=description, display_order=order))
            added += 1
    existing_rating = set(db.scalars(select(RatingCategory.name)))
    for name, description in RATING_CATEGORIES:
        if name not in existing_rating:
            db.add(RatingCategory(name=name, description=description))
            added += 1
    db.commit()
    return added


def init_db() -> int:
    """Initialize the database by creating all tables and seeding categories."""
    create_tables()
    with SessionLocal() as db:
        return seed_categories(db)


def main() -> None:
    added = init_db()
    print(f"Database initialized ({added} categories added).")


if __name__ == "__main__":
    main()
