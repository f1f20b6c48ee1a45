#!/usr/bin/env python3
"""
Seed demo mentors and a demo candidate.
Run from the project root: python3 scripts/seed_mentors.py [password]

Existing users (matched by email) are left untouched.
"""
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import bcrypt

from mentor_booking.config import get_config
from mentor_booking.db.mongo import USERS, get_database
from mentor_booking.utils.datetime_utils import get_now_ist

DEMO_MENTORS = [
    {
        "name": "Aarav Mehta",
        "email": "aarav.mentor@example.com",
        "specializations": ["DSA", "System Design"],
        "averageRating": 4.8,
        "experience": 7,
        "workingHours": {"start": 9, "end": 17},
    },
    {
        "name": "Diya Sharma",
        "email": "diya.mentor@example.com",
        "specializations": ["Data Science", "Analytics"],
        "averageRating": 4.6,
        "experience": 5,
        "workingHours": {"start": 10, "end": 18},
    },
    {
        "name": "Kabir Rao",
        "email": "kabir.mentor@example.com",
        "specializations": ["DSA", "Behavioral"],
        "averageRating": 4.9,
        "experience": 10,
        "workingHours": {"start": 9, "end": 13},
    },
]

DEMO_CANDIDATE = {"name": "Demo Candidate", "email": "candidate@example.com", "role": "candidate"}


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def seed(password: str):
    config = get_config()
    users = get_database(config)[USERS]
    password_hash = hash_password(password)
    now = get_now_ist()

    people = [dict(m, role="mentor", isActive=True) for m in DEMO_MENTORS] + [DEMO_CANDIDATE]
    for person in people:
        if users.find_one({"email": person["email"]}):
            print(f"⚠️  {person['email']} already exists, skipping")
            continue
        doc = dict(person, password=password_hash, totalSessions=0, completedSessions=0, createdAt=now)
        result = users.insert_one(doc)
        print(f"✅ Created {person['role']} {person['email']} ({result.inserted_id})")


if __name__ == "__main__":
    seed(sys.argv[1] if len(sys.argv) > 1 else "changeme123")
