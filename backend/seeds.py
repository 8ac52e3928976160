"""
Seed demo data through the PublicApi gateways.

Safe to run repeatedly: accounts and users are upserted by natural key, and
documents are only created for users that have none yet.

Usage:
    python seeds.py
"""

import logging

from sqlalchemy.orm import Session

from constants import DocumentStatus, UserRole
from database import SessionLocal
from documents.public_api import AccountPublicApi, DocumentPublicApi
from init_db import init_database
from user_management.public_api import UserPublicApi

logger = logging.getLogger(__name__)

FIRST_NAMES = ["Alice", "Bob", "Carol", "Dave", "Emma", "Frank", "Grace", "Henry", "Ivy", "Jack"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis"]
ROLES = [UserRole.GUEST, UserRole.MEMBER, UserRole.ADMIN, UserRole.SUPER_ADMIN]
DOCUMENT_TITLES = [
    "Resume", "Cover Letter", "Portfolio", "Reference Letter", "Transcript",
    "Certificate", "Work Sample", "Background Check", "Employment Agreement", "NDA",
]
CONTENT_SAMPLES = [
    "This document contains important information about the candidate's qualifications and experience.",
    "Detailed overview of professional background and achievements in the field.",
    "Supporting documentation for employment verification and reference checks.",
]


def seed(db: Session, accounts: int = 5, users: int = 10, documents_per_user: int = 8) -> dict:
    """
    Create demo accounts, users and documents.

    Args:
        db: Database session
        accounts: Number of accounts
        users: Number of users, spread round-robin over the accounts
        documents_per_user: Documents created for each user without documents

    Returns:
        Counts of rows present afterwards, keyed by table
    """
    account_api = AccountPublicApi(db)
    user_api = UserPublicApi(db)
    document_api = DocumentPublicApi(db)

    seeded_accounts = [
        account_api.find_by(name=f"Account {i + 1}") or account_api.create_or_raise(name=f"Account {i + 1}")
        for i in range(accounts)
    ]

    statuses = list(DocumentStatus)
    for i in range(users):
        user = user_api.upsert(
            {"email": f"user{i + 1}@example.com"},
            first_name=FIRST_NAMES[i % len(FIRST_NAMES)],
            last_name=LAST_NAMES[i % len(LAST_NAMES)],
            account_id=seeded_accounts[i % len(seeded_accounts)].id if seeded_accounts else None,
            role=ROLES[i % len(ROLES)],
        )
        if document_api.exists(user_id=user.id):
            continue

        document_api.batch_create([
            {
                "title": f"{DOCUMENT_TITLES[(i + n) % len(DOCUMENT_TITLES)]} #{n + 1}",
                "content": CONTENT_SAMPLES[n % len(CONTENT_SAMPLES)],
                "user_id": user.id,
                "status": statuses[n % len(statuses)],
            }
            for n in range(documents_per_user)
        ])

    counts = {
        "accounts": account_api.count(),
        "users": user_api.count(),
        "documents": document_api.count(),
    }
    logger.info(f"Seeding complete: {counts}")
    return counts


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
