#!/usr/bin/env python3
"""
Populate the Social Network SQLite database with sample data.

The script wipes every application table and then creates five users
(with profiles, experience and education), a handful of follow edges,
posts, likes and comments.  Everything goes through the service layer
so the data obeys the same rules as data created over the API.

Usage:
    python seed.py --db ./social_network_api/social_network.db

Every sample user has the password ``password123``.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date

from social_network_api.app.core.config import settings
from social_network_api.app.core.db import Database
from social_network_api.app.core.errors import ServiceError
from social_network_api.app.core.logging_config import setup_logging
from social_network_api.app.schemas.post import CommentCreate, PostCreate
from social_network_api.app.schemas.user import (
    EducationCreate,
    ExperienceCreate,
    UserCreate,
    UserUpdate,
)
from social_network_api.app.services.auth_service import AuthService
from social_network_api.app.services.follow_service import FollowService
from social_network_api.app.services.image_storage import CloudinaryStorage
from social_network_api.app.services.post_service import PostService
from social_network_api.app.services.user_service import UserService


logger = logging.getLogger("seed")

SAMPLE_PASSWORD = "password123"

USERS = [
    {
        "account": {"username": "johndoe", "email": "john@example.com", "first_name": "John", "last_name": "Doe"},
        "profile": {
            "bio": "Software developer and tech enthusiast",
            "location": "San Francisco, CA",
            "website": "https://johndoe.dev",
        },
        "experiences": [
            {
                "title": "Senior Software Engineer",
                "company": "Tech Corp",
                "location": "San Francisco, CA",
                "start_date": date(2020, 1, 1),
                "current": True,
                "description": "Leading development of web applications",
            }
        ],
        "education": [
            {
                "school": "Stanford University",
                "degree": "Bachelor of Science",
                "field_of_study": "Computer Science",
                "start_date": date(2014, 9, 1),
                "end_date": date(2018, 6, 1),
            }
        ],
    },
    {
        "account": {"username": "janedoe", "email": "jane@example.com", "first_name": "Jane", "last_name": "Doe"},
        "profile": {"bio": "Designer and creative thinker", "location": "New York, NY"},
        "experiences": [
            {
                "title": "Product Designer",
                "company": "Design Studio",
                "location": "New York, NY",
                "start_date": date(2019, 3, 1),
                "current": True,
            }
        ],
        "education": [
            {
                "school": "NYU",
                "degree": "Bachelor of Fine Arts",
                "field_of_study": "Graphic Design",
                "start_date": date(2015, 9, 1),
                "end_date": date(2019, 5, 1),
            }
        ],
    },
    {
        "account": {"username": "bobsmith", "email": "bob@example.com", "first_name": "Bob", "last_name": "Smith"},
        "profile": {"bio": "Entrepreneur and startup founder", "location": "Austin, TX"},
    },
    {
        "account": {
            "username": "alicejohnson",
            "email": "alice@example.com",
            "first_name": "Alice",
            "last_name": "Johnson",
        },
        "profile": {"bio": "Data scientist and AI researcher", "location": "Seattle, WA"},
    },
    {
        "account": {
            "username": "charliebrown",
            "email": "charlie@example.com",
            "first_name": "Charlie",
            "last_name": "Brown",
        },
        "profile": {"bio": "Full-stack developer", "location": "Boston, MA"},
    },
]

# (follower index, following index)
FOLLOWS = [(0, 1), (0, 2), (1, 0), (2, 0), (2, 1), (3, 0), (4, 0)]

# (author index, text)
POSTS = [
    (0, "Just launched my new project! Excited to share it with everyone. 🚀"),
    (1, "Beautiful sunset today! Nature never fails to inspire my designs."),
    (0, "Working on some exciting new features. Can't wait to show you all!"),
    (2, "Starting a new venture. The journey begins now! 💼"),
    (1, "Design is not just what it looks like - design is how it works."),
    (3, "Machine learning models are getting better every day. Fascinating times!"),
    (4, "Code review done. Always learning something new from the team."),
    (0, "Thanks everyone for the amazing feedback on the latest release!"),
]

# (post index, liker index)
LIKES = [(0, 1), (0, 2), (1, 0), (1, 2), (2, 1)]

# (post index, commenter index, text)
COMMENTS = [
    (0, 1, "Congratulations! This looks amazing!"),
    (2, 1, "Looking forward to seeing it!"),
]


async def seed(db: Database) -> None:
    auth = AuthService(db, settings)
    users = UserService(db)
    follows = FollowService(db)
    posts = PostService(db, CloudinaryStorage(settings), folder=settings.cloudinary_folder)

    user_ids = []
    for sample in USERS:
        user, _ = await auth.register(UserCreate(password=SAMPLE_PASSWORD, **sample["account"]))
        await users.update_user(user.id, user.id, UserUpdate(**sample["profile"]))
        for experience in sample.get("experiences", []):
            await users.add_experience(user.id, user.id, ExperienceCreate(**experience))
        for education in sample.get("education", []):
            await users.add_education(user.id, user.id, EducationCreate(**education))
        user_ids.append(user.id)
    logger.info("Created %d users", len(user_ids))

    for follower, following in FOLLOWS:
        await follows.follow(user_ids[follower], user_ids[following])
    logger.info("Created %d follow relationships", len(FOLLOWS))

    post_ids = []
    for author, text in POSTS:
        post = await posts.create_post(user_ids[author], PostCreate(text=text))
        post_ids.append(post.id)
    logger.info("Created %d posts", len(post_ids))

    for post, liker in LIKES:
        await posts.toggle_like(post_ids[post], user_ids[liker])
    for post, commenter, text in COMMENTS:
        await posts.add_comment(post_ids[post], user_ids[commenter], CommentCreate(text=text))
    logger.info("Added likes and comments")


def main() -> None:
    ap = argparse.ArgumentParser(description="Wipe and seed the Social Network database.")
    ap.add_argument(
        "--db",
        default=settings.database_url,
        help="Path to the SQLite DB file (default: DATABASE_URL or social_network.db)",
    )
    args = ap.parse_args()

    setup_logging(settings.log_level)
    db = Database(args.db)
    db.init_db()
    db.reset()
    logger.info("Cleared existing data in %s", db.path)

    try:
        asyncio.run(seed(db))
    except ServiceError as exc:
        print(f"[!] Seeding failed: {exc.message}", file=sys.stderr)
        sys.exit(1)

    print("[+] Seed data created successfully")
    print("Sample users:")
    for sample in USERS:
        print(f"  - {sample['account']['email']} / {SAMPLE_PASSWORD}")


if __name__ == "__main__":
    main()
