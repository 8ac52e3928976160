import pytest

from constants import DocumentStatus, UserRole
from documents.dto import AccountDto
from user_management.dto import UserDto
from user_management.relations import UserRelations


@pytest.fixture
def account(account_api):
    return account_api.create_or_raise(name="Acme")


def test_user_dto_exposes_computed_attributes(make_user):
    admin = make_user(first_name="Ada", last_name="King", role=UserRole.SUPER_ADMIN)
    member = make_user(role=UserRole.MEMBER)

    assert admin.full_name == "Ada King"
    assert admin.administrator is True
    assert getattr(admin, "administrator?") is True
    assert admin["regular_user?"] is False
    assert member.administrator is False
    assert member.regular_user is True


def test_user_dto_field_order():
    assert UserDto.attribute_names() == [
        "id", "email", "first_name", "last_name", "account_id", "role",
        "created_at", "updated_at", "full_name", "administrator?", "regular_user?",
    ]


def test_user_dto_from_plain_mapping():
    dto = UserDto({"id": 5, "email": "fixture@example.com", "role": "guest"})

    assert dto.email == "fixture@example.com"
    assert dto.full_name is None
    assert dto.administrator is None


def test_role_scopes(user_api, make_user):
    guest = make_user(role=UserRole.GUEST)
    admin = make_user(role=UserRole.ADMIN)
    super_admin = make_user(role=UserRole.SUPER_ADMIN)
    member = make_user(role=UserRole.MEMBER)

    assert user_api.administrators() == [admin, super_admin]
    assert user_api.regular_users() == [guest, member]
    assert user_api.with_role(UserRole.MEMBER) == [member]


def test_account_helpers(user_api, make_user, account):
    a = make_user(account_id=account.id)
    b = make_user(account_id=account.id)
    make_user()

    assert user_api.get_all_by_account_id(account.id) == [a, b]
    assert user_api.count_by_account(account.id) == 2
    assert user_api.pluck_by_account_id(account.id, "id") == [a.id, b.id]
    assert user_api.pluck_by_account_id(account.id, "id", "email") == [(a.id, a.email), (b.id, b.email)]


def test_find_by_email(user_api, make_user):
    user = make_user(email="lookup@example.com")

    assert user_api.find_by_email("lookup@example.com") == user
    assert user_api.find_by_email("missing@example.com") is None


def test_deleting_user_removes_their_documents(user_api, document_api, make_user):
    user = make_user()
    document_api.create_or_raise(title="Resume", user_id=user.id)
    document_api.create_or_raise(title="NDA", user_id=user.id)

    assert user_api.delete(user.id) is True
    assert document_api.count() == 0


def test_relations_account_for(db_session, make_user, account):
    relations = UserRelations(db_session)
    with_account = make_user(account_id=account.id)
    without_account = make_user()

    found = relations.account_for(with_account)

    assert isinstance(found, AccountDto)
    assert found == account
    assert relations.account_for(without_account) is None


def test_relations_account_summary_for(db_session, make_user, account):
    relations = UserRelations(db_session)
    with_account = make_user(account_id=account.id)

    summary = relations.account_summary_for(with_account)

    assert summary.id == account.id
    assert summary.name == "Acme"
    assert summary.users_count == 1
    assert relations.account_summary_for(make_user()) is None


def test_relations_documents(db_session, document_api, make_user):
    relations = UserRelations(db_session)
    user = make_user()
    other = make_user()
    document_api.create_or_raise(title="Resume", user_id=user.id)
    document_api.create_or_raise(title="NDA", user_id=user.id, status=DocumentStatus.SIGNED)
    document_api.create_or_raise(title="Other", user_id=other.id)

    assert [d.title for d in relations.documents_for(user)] == ["Resume", "NDA"]
    assert [d.title for d in relations.documents_for(user, status=DocumentStatus.SIGNED)] == ["NDA"]
    assert relations.documents_count_for(user) == 2
    assert relations.documents_count_for(user, status="uploaded") == 1

    grouped = relations.documents_by_status(user)
    assert list(grouped) == ["uploaded", "reviewed", "signed", "archived"]
    assert [d.title for d in grouped["uploaded"]] == ["Resume"]
    assert grouped["archived"] == []
