from seeds import seed


def test_seed_creates_demo_data(db_session):
    counts = seed(db_session, accounts=2, users=4, documents_per_user=3)

    assert counts == {"accounts": 2, "users": 4, "documents": 12}


def test_seed_is_idempotent(db_session, user_api):
    seed(db_session, accounts=2, users=4, documents_per_user=3)
    counts = seed(db_session, accounts=2, users=4, documents_per_user=3)

    assert counts == {"accounts": 2, "users": 4, "documents": 12}
    assert user_api.find_by_email("user3@example.com").administrator is True
