import pytest

from exceptions import ValidationError

from constants import DocumentStatus
from documents.dto import DocumentDto


@pytest.fixture
def owner(make_user):
    return make_user()


def test_storage_bytes_counts_title_and_content(document_api, owner):
    document = document_api.create_or_raise(title="Hi", content="héllo", user_id=owner.id)

    assert isinstance(document, DocumentDto)
    assert document.storage_bytes == 8
    assert document.status == "uploaded"


def test_storage_bytes_recomputed_on_update(document_api, owner):
    document = document_api.create_or_raise(title="Hi", user_id=owner.id)

    updated = document_api.update(document.id, content="abcd")

    assert updated.storage_bytes == 6


def test_document_requires_title_and_owner(document_api):
    with pytest.raises(ValidationError) as exc_info:
        document_api.create_or_raise(content="orphan")

    assert set(exc_info.value.invalid_fields) == {"title", "user_id"}


def test_document_with_unknown_owner_is_rejected(document_api):
    assert document_api.create(title="Ghost", user_id=12345) is None
    assert document_api.count() == 0


def test_invalid_status_is_rejected(document_api, owner):
    assert document_api.create(title="Draft", user_id=owner.id, status="draft") is None


def test_documents_for_user(document_api, owner, make_user):
    other = make_user()
    document_api.create_or_raise(title="A", user_id=owner.id, status=DocumentStatus.REVIEWED)
    document_api.create_or_raise(title="B", user_id=owner.id)
    document_api.create_or_raise(title="C", user_id=other.id)

    assert [d.title for d in document_api.documents_for_user(owner.id)] == ["A", "B"]
    assert [d.title for d in document_api.documents_for_user(owner.id, DocumentStatus.REVIEWED)] == ["A"]
    assert document_api.count_for_user(owner.id) == 2


def test_search_matches_title_and_content_case_insensitively(document_api, owner):
    document_api.create_or_raise(title="Resume", content="python developer", user_id=owner.id)
    document_api.create_or_raise(title="Cover letter", content="Dear hiring manager", user_id=owner.id)
    document_api.create_or_raise(title="Python certificate", user_id=owner.id, status=DocumentStatus.SIGNED)

    page = document_api.search(text="PYTHON", sort_by="title", order="asc")

    assert page.total == 2
    assert [d.title for d in page.documents] == ["Python certificate", "Resume"]

    signed = document_api.search(text="python", status=DocumentStatus.SIGNED)
    assert [d.title for d in signed.documents] == ["Python certificate"]


def test_search_paginates_and_falls_back_on_unknown_sort(document_api, owner):
    document_api.batch_create([{"title": f"Doc {n}", "user_id": owner.id} for n in range(5)])

    page = document_api.search(text="*", limit=2, offset=2, sort_by="nonsense", order="asc")

    assert page.total == 5
    assert [d.title for d in page.documents] == ["Doc 2", "Doc 3"]


def test_update_by_skips_storage_recalculation(document_api, owner):
    document = document_api.create_or_raise(title="Hi", user_id=owner.id)

    assert document_api.update_by({"user_id": owner.id}, status=DocumentStatus.ARCHIVED) == 1

    reloaded = document_api.find(document.id)
    assert reloaded.status == "archived"
    assert reloaded.storage_bytes == 2


def test_account_aggregates(account_api, document_api, make_user):
    account = account_api.create_or_raise(name="Acme")
    empty = account_api.create_or_raise(name="Empty")
    alice = make_user(account_id=account.id)
    bob = make_user(account_id=account.id)
    document_api.create_or_raise(title="abc", content="12345", user_id=alice.id)
    document_api.create_or_raise(title="de", user_id=bob.id)
    document_api.create_or_raise(title="elsewhere", user_id=make_user().id)

    assert account_api.users(account.id) == [alice, bob]
    assert account_api.users_count(account.id) == 2
    assert [d.title for d in account_api.documents(account.id)] == ["abc", "de"]
    assert account_api.documents_count(account.id) == 2
    assert account_api.total_storage_bytes(account.id) == 10

    assert account_api.documents(empty.id) == []
    assert account_api.documents_count(empty.id) == 0
    assert account_api.total_storage_bytes(empty.id) == 0


def test_account_summary(account_api, document_api, make_user):
    account = account_api.create_or_raise(name="Acme")
    user = make_user(account_id=account.id)
    document_api.create_or_raise(title="abc", user_id=user.id)

    summary = account_api.summary(account.id)

    assert summary.model_dump(exclude={"created_at", "updated_at"}) == {
        "id": account.id,
        "name": "Acme",
        "users_count": 1,
        "documents_count": 1,
        "total_storage_bytes": 3,
    }
    assert account_api.summary(999) is None


def test_account_requires_name(account_api):
    assert account_api.create(name="") is None


def test_search_treats_wildcards_literally(document_api, owner):
    document_api.create_or_raise(title="Score 100%", user_id=owner.id)
    document_api.create_or_raise(title="Score 1000", user_id=owner.id)
    document_api.create_or_raise(title="file_a", user_id=owner.id)
    document_api.create_or_raise(title="fileXa", user_id=owner.id)

    assert [d.title for d in document_api.search(text="100%").documents] == ["Score 100%"]
    assert [d.title for d in document_api.search(text="e_a").documents] == ["file_a"]


def test_batch_create_continues_after_database_rejection(document_api, owner):
    result = document_api.batch_create_detailed([
        {"title": "A", "user_id": owner.id},
        {"title": "B", "user_id": 999},
        {"title": "C", "user_id": owner.id},
    ])

    assert [d.title for d in result.created] == ["A", "C"]
    assert "base" in result.errors[1]
    assert document_api.count() == 2
