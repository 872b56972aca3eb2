"""Database models."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Numeric, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    """Account model. Role is Member or Admin."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    password_hash = Column(String(100), nullable=False)
    role = Column(String(20), default="Member", nullable=False)
    phone_number = Column(String(15), nullable=True)
    address = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="member")


class Category(Base):
    """Menu category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    # Relationships
    menu_items = relationship("MenuItem", back_populates="category")


class MenuItem(Base):
    """Menu item model."""

    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    photo_url = Column(String(200), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    category = relationship("Category", back_populates="menu_items")


class Order(Base):
    """Order model."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String(30), default="Paid", nullable=False)  # Paid, Preparing, Delivered, ...
    payment_method = Column(String(30), nullable=False)  # Cash, Card, Online Banking
    delivery_address = Column(String(200), nullable=True)
    delivery_option = Column(String(30), nullable=True)  # Delivery, Pickup
    delivery_instructions = Column(Text, nullable=True)
    status_change_count = Column(Integer, default=0, nullable=False)
    previous_status = Column(String(30), nullable=True)
    last_modified_by_role = Column(String(20), nullable=True)
    last_status_change_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    member = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    @property
    def total(self) -> Decimal:
        """Sum of line totals. Requires items to be loaded."""
        return sum((Decimal(str(item.unit_price)) * item.quantity for item in self.items), Decimal("0.00"))


class OrderItem(Base):
    """Order line model. Name and unit price are captured at checkout."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    item_name = Column(String(100), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    personalization = Column(String(500), nullable=True)

    # Relationships
    order = relationship("Order", back_populates="items")


class MenuItemRating(Base):
    """A member's 1-5 star rating of a menu item. One per member and item."""

    __tablename__ = "menu_item_ratings"
    __table_args__ = (UniqueConstraint("menu_item_id", "member_id", name="uq_rating_member_item"),)

    id = Column(Integer, primary_key=True, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    value = Column(Integer, nullable=False)
    rated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class MenuItemComment(Base):
    """A member's comment on a menu item."""

    __tablename__ = "menu_item_comments"

    id = Column(Integer, primary_key=True, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(String(500), nullable=False)
    commented_at = Column(DateTime, default=datetime.utcnow, nullable=False)
