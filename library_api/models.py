import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Role(str, enum.Enum):
    LIBRARIAN = "librarian"
    STUDENT = "student"
    GENERAL = "general"

    def __str__(self):
        return self.value


class Base(DeclarativeBase):
    pass

    def __str__(self):
        return self.__repr__()


class AuditMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
        server_default=func.now(),
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)


class User(AuditMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            validate_strings=True,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
    )
    penalty: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, server_default="0")
    blocked: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default="0"
    )

    borrows: Mapped[List["Borrow"]] = relationship("Borrow", back_populates="user")
    books_donated: Mapped[List["Book"]] = relationship("Book", back_populates="donated_by")

    def __repr__(self):
        return self.name


class Book(AuditMixin, Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)
    donated_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    available: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False, server_default="1"
    )

    donated_by: Mapped[Optional[User]] = relationship(back_populates="books_donated")
    borrows: Mapped[List["Borrow"]] = relationship("Borrow", back_populates="book")

    def __repr__(self):
        return self.title


class Borrow(AuditMixin, Base):
    __tablename__ = "borrows"

    id: Mapped[int] = mapped_column(primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    borrow_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    return_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    returned: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default="0"
    )
    fine_amount: Mapped[float] = mapped_column(
        Float, default=0.0, nullable=False, server_default="0"
    )
    fine_paid: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, server_default="0"
    )

    book: Mapped[Book] = relationship(back_populates="borrows")
    user: Mapped[User] = relationship(back_populates="borrows")

    def __repr__(self):
        return f"Borrow {self.id} of book {self.book_id}"
