from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from .database import Base
import datetime

# --- CUSTOMERS ---
# *_encrypted columns hold EncryptedPayload JSON under the customer's
# (field_type, public_id) context; decrypt through customer_service only.


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(64), unique=True, index=True, nullable=False)
    email_hash = Column(String(64), unique=True, index=True, nullable=False)  # SHA256 of lowercased email
    email_encrypted = Column(Text, nullable=False)
    name_encrypted = Column(Text, nullable=False)
    phone_encrypted = Column(Text, nullable=True)
    is_verified = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    addresses = relationship("ShippingAddress", back_populates="customer", cascade="all, delete-orphan")
    verification_codes = relationship("VerificationCode", back_populates="customer", cascade="all, delete-orphan")


class ShippingAddress(Base):
    __tablename__ = "shipping_addresses"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    label = Column(String(50), nullable=True)
    address_encrypted = Column(Text, nullable=False)
    delivery_notes_encrypted = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    customer = relationship("Customer", back_populates="addresses")


# --- VERIFICATION ---

class VerificationCode(Base):
    __tablename__ = "verification_codes"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    code_hash = Column(String(128), nullable=False)
    code_salt = Column(String(128), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    consumed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    customer = relationship("Customer", back_populates="verification_codes")
