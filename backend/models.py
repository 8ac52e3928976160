from sqlalchemy import Column, String, Integer, BigInteger, Text, DateTime, ForeignKey, CheckConstraint, Index, event, select
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base
from constants import UserRole, DocumentStatus


class Account(Base):
    __tablename__ = 'accounts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class User(Base):
    """
    A person belonging (optionally) to an account.

    Roles:
    - guest, member: regular users
    - admin, super_admin: administrators

    Related account and documents are reached through the gateways in
    user_management.relations, not through ORM relationships.
    """
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey('accounts.id'), nullable=True, index=True)
    role = Column(String, nullable=False, default=UserRole.GUEST.value)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Documents are destroyed together with their owner
    documents = relationship("Document", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_administrator(self) -> bool:
        return self.role in UserRole.administrators()

    @property
    def is_regular_user(self) -> bool:
        return self.role in UserRole.regular()

    @classmethod
    def administrators(cls):
        """Select users with an administrator role."""
        return select(cls).where(cls.role.in_([role.value for role in UserRole.administrators()]))

    @classmethod
    def regular_users(cls):
        """Select users with a regular (guest/member) role."""
        return select(cls).where(cls.role.in_([role.value for role in UserRole.regular()]))


class Document(Base):
    __tablename__ = 'documents'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    content = Column(Text)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    status = Column(String, nullable=False, default=DocumentStatus.UPLOADED.value)
    storage_bytes = Column(BigInteger, nullable=False, default=0)  # title + content, UTF-8 bytes
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="documents")

    __table_args__ = (
        CheckConstraint("storage_bytes >= 0", name='ck_documents_storage_bytes'),
        Index('idx_documents_title', 'title'),
        Index('idx_documents_status', 'status'),
        Index('idx_documents_user_created', 'user_id', 'created_at'),
    )

    def calculate_storage_bytes(self) -> int:
        return len((self.content or '').encode('utf-8')) + len((self.title or '').encode('utf-8'))


@event.listens_for(Document, "before_insert")
@event.listens_for(Document, "before_update")
def _refresh_storage_bytes(mapper, connection, target: Document):
    target.storage_bytes = target.calculate_storage_bytes()
