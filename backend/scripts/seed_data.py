"""Seed the database with demo users and content."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta
from campus_portal.database import SessionLocal, engine, Base
import campus_portal.models  # noqa: F401

from campus_portal.models.user import User
from campus_portal.models.content import ContentComment, ContentItem, ContentLike, EventRegistration
from campus_portal.services.auth_service import hash_password

DEMO_PASSWORD = "password123"


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Users
        users = [
            User(name="Admin Kim", email="admin@campus.edu", role="admin"),
            User(name="Prof. Lee", email="lee@campus.edu", role="faculty"),
            User(name="Jiwoo Park", email="jiwoo@campus.edu", role="student"),
            User(name="Minho Choi", email="minho@campus.edu", role="student"),
        ]
        for user in users:
            user.password_hash = hash_password(DEMO_PASSWORD)
        db.add_all(users)
        db.flush()
        admin, faculty, student1, student2 = users

        # Content
        announcement = ContentItem(
            kind="announcement",
            owner_id=admin.user_id,
            title="Library hours extended",
            description="The main library is open until midnight during exam weeks.",
        )
        event = ContentItem(
            kind="event",
            owner_id=faculty.user_id,
            title="AI Seminar",
            description="Guest lecture on applied machine learning.",
            event_date=datetime.now().replace(microsecond=0) + timedelta(days=7),
            location="Engineering Hall 101",
            registration_limit=30,
        )
        resource = ContentItem(
            kind="resource",
            owner_id=faculty.user_id,
            title="Data Structures lecture notes",
            description="Week 1-4 slides.",
            file_url="https://files.campus.edu/ds/week1-4.pdf",
            category="Lecture Notes",
        )
        db.add_all([announcement, event, resource])
        db.flush()

        db.add_all([
            ContentComment(item_id=announcement.item_id, author_id=student1.user_id, text="Great news!"),
            ContentLike(item_id=announcement.item_id, user_id=student1.user_id),
            ContentLike(item_id=resource.item_id, user_id=student2.user_id),
            EventRegistration(item_id=event.item_id, user_id=student1.user_id),
        ])

        db.commit()
        print("Database seeded successfully!")
        print(f"  Users: {len(users)} (password: {DEMO_PASSWORD})")
        print("  Content: 1 announcement, 1 event, 1 resource")
    except Exception as e:
        db.rollback()
        print(f"Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
