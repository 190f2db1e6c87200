"""SQLAlchemy database models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pantrywise.database import Base
from pantrywise.normalize.units import NormalizedQuantity


def _new_id() -> str:
    return str(uuid4())


class StoredQuantityMixin:
    """Columns for a quantity persisted in canonical base units."""

    quantity: Mapped[Decimal | None] = mapped_column(Numeric(12, 3), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(20), nullable=True)
    unit_type: Mapped[str | None] = mapped_column(String(10), nullable=True)  # UnitType

    @property
    def normalized_quantity(self) -> NormalizedQuantity | None:
        """Re-hydrate the stored triple without converting again."""
        if self.quantity is None:
            return None
        return NormalizedQuantity.from_stored(self.quantity, self.unit, self.unit_type)

    def set_quantity(self, quantity: NormalizedQuantity) -> None:
        self.quantity, self.unit, self.unit_type = quantity.to_stored()


class User(Base):
    """User account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    preferences: Mapped["UserPreference"] = relationship(
        "UserPreference", back_populates="user", uselist=False
    )


class UserPreference(Base):
    """Per-user settings, including the daily calorie goal."""

    __tablename__ = "user_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), unique=True)
    caloric_goal: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="preferences")


class Recipe(Base):
    """Recipe owned by a user."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    cuisine_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    servings: Mapped[int] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_recipes_user_id", "user_id"),)


class RecipeIngredient(StoredQuantityMixin, Base):
    """Ingredient line of a recipe."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String, nullable=False)
    normalized_name: Mapped[str] = mapped_column(String, nullable=False)
    raw_quantity: Mapped[str | None] = mapped_column(String, nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")


class CupboardItem(StoredQuantityMixin, Base):
    """Item currently held in the user's cupboard."""

    __tablename__ = "cupboard_items"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    item_name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_depleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    added_date: Mapped[date] = mapped_column(Date, default=date.today)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_cupboard_items_user_id", "user_id"),
        Index("idx_cupboard_items_is_depleted", "is_depleted"),
    )


class Receipt(Base):
    """Uploaded shopping receipt."""

    __tablename__ = "receipts"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    store_name: Mapped[str | None] = mapped_column(String, nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, processed, failed
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    items: Mapped[list["ReceiptItem"]] = relationship(
        "ReceiptItem", back_populates="receipt", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_receipts_user_id", "user_id"),)


class ReceiptItem(StoredQuantityMixin, Base):
    """Line item extracted from a receipt."""

    __tablename__ = "receipt_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    receipt_id: Mapped[str] = mapped_column(String, ForeignKey("receipts.id", ondelete="CASCADE"))
    item_name: Mapped[str] = mapped_column(String, nullable=False)
    normalized_name: Mapped[str | None] = mapped_column(String, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    receipt: Mapped["Receipt"] = relationship("Receipt", back_populates="items")


class PurchaseHistory(Base):
    """Running purchase statistics per user and item."""

    __tablename__ = "purchase_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    item_name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_purchased: Mapped[date] = mapped_column(Date, nullable=False)
    purchase_count: Mapped[int] = mapped_column(Integer, default=1)
    avg_frequency_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    avg_quantity: Mapped[Decimal | None] = mapped_column(Numeric(12, 3), nullable=True)
    estimated_deplete_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (Index("idx_purchase_history_user_item", "user_id", "item_name", unique=True),)


class MealLog(Base):
    """A meal the user actually ate."""

    __tablename__ = "meal_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    name: Mapped[str] = mapped_column(String, nullable=False)
    meal_type: Mapped[str | None] = mapped_column(String(20), nullable=True)  # breakfast, lunch
    calories: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    consumed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (Index("idx_meal_logs_user_consumed", "user_id", "consumed_at"),)


class PlannedMeal(Base):
    """A meal scheduled on the user's plan."""

    __tablename__ = "planned_meals"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"))
    recipe_id: Mapped[str | None] = mapped_column(String, ForeignKey("recipes.id"), nullable=True)
    planned_date: Mapped[date] = mapped_column(Date, nullable=False)
    meal_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    calories: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (Index("idx_planned_meals_user_date", "user_id", "planned_date"),)
