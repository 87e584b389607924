"""SQLAlchemy models for paytrack database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Float,
    Boolean,
    ForeignKey,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    can_add = Column(Boolean, default=False, nullable=False)
    can_edit = Column(Boolean, default=False, nullable=False)
    can_delete = Column(Boolean, default=False, nullable=False)
    can_change_status = Column(Boolean, default=False, nullable=False)
    can_manage_categories = Column(Boolean, default=False, nullable=False)
    can_manage_users = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, nullable=False, default=0)


class Payment(Base):
    """Payment (check) model."""

    __tablename__ = "payments"

    id = Column(String, primary_key=True)
    # Store order is the display order of the list view.
    position = Column(Integer, nullable=False, default=0)
    due_date = Column(Date, nullable=False)
    check_number = Column(String, nullable=False)
    bank = Column(String, nullable=False)
    company = Column(String, nullable=False)
    business_group = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="pending")


class Category(Base):
    """Category model (bank, company or business group)."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)

    # Relationships
    items = relationship(
        "CategoryItem",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="CategoryItem.position",
    )


class CategoryItem(Base):
    """Item of a bank, company or business group category."""

    __tablename__ = "category_items"

    id = Column(Integer, primary_key=True)
    category_id = Column(String, ForeignKey("categories.id"), nullable=False)
    name = Column(String, nullable=False)
    position = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_category_item"),)

    # Relationships
    category = relationship("Category", back_populates="items")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
