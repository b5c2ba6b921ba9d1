"""
Customer PII storage for the storefront.

Every PII column is encrypted under the customer's own field context
(field_type, public_id), so decrypting requires both the master key and the
owning customer id. Lookups by email go through a SHA-256 blind index.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from Security.attempt_limiting import create_attempt_limiter
from Security.data_integrity import sha256_hex
from Security.encryption_service import EncryptionService
from Security.field_level_encryption import ADDRESS, EMAIL, NAME, PHONE
from Security.security_logging import get_security_logger

from .models import Customer, ShippingAddress, VerificationCode


VERIFICATION_CODE_LENGTH = 6
VERIFICATION_CODE_TTL = datetime.timedelta(minutes=10)
DELIVERY_NOTES = "delivery_notes"

# Keyed by customer public_id
confirm_limiter = create_attempt_limiter("VERIFY_CONFIRM", max_attempts=5, window_seconds=600, lock_seconds=900)
issue_limiter = create_attempt_limiter("VERIFY_ISSUE", max_attempts=5, window_seconds=3600, lock_seconds=3600)

logger = get_security_logger("customers", root="storefront")


class CustomerExistsError(Exception):
    pass


class VerificationLockedError(Exception):
    pass


def email_index(email: str) -> str:
    return sha256_hex(email.strip().lower())


def find_customer(db: Session, public_id: str) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.public_id == public_id).first()


def find_customer_by_email(db: Session, email: str) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.email_hash == email_index(email)).first()


def register_customer(
    db: Session,
    service: EncryptionService,
    email: str,
    name: str,
    phone: str | None = None,
) -> Customer:
    if find_customer_by_email(db, email):
        raise CustomerExistsError("A customer with this email already exists")

    public_id = uuid.uuid4().hex
    customer = Customer(
        public_id=public_id,
        email_hash=email_index(email),
        email_encrypted=service.encrypt_pii(email.strip(), EMAIL, public_id),
        name_encrypted=service.encrypt_pii(name, NAME, public_id),
        phone_encrypted=service.encrypt_pii(phone, PHONE, public_id) if phone else None,
    )
    db.add(customer)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise CustomerExistsError("A customer with this email already exists") from exc
    db.refresh(customer)
    logger.info("customer registered public_id=%s email=%s", public_id, service.mask_data(email, 2))
    return customer


def get_customer_profile(service: EncryptionService, customer: Customer) -> dict:
    public_id = customer.public_id
    phone = None
    if customer.phone_encrypted:
        phone = service.decrypt_pii(customer.phone_encrypted, PHONE, public_id)
    return {
        "id": public_id,
        "email": service.decrypt_pii(customer.email_encrypted, EMAIL, public_id),
        "name": service.decrypt_pii(customer.name_encrypted, NAME, public_id),
        "phone": phone,
        "is_verified": bool(customer.is_verified),
    }


def get_masked_profile(service: EncryptionService, customer: Customer) -> dict:
    profile = get_customer_profile(service, customer)
    for field_name, visible in (("email", 3), ("name", 1), ("phone", 2)):
        if profile[field_name]:
            profile[field_name] = service.mask_data(profile[field_name], visible)
    return profile


def add_shipping_address(
    db: Session,
    service: EncryptionService,
    customer: Customer,
    address: str,
    label: str | None = None,
    delivery_notes: str | None = None,
) -> ShippingAddress:
    public_id = customer.public_id
    row = ShippingAddress(
        customer_id=customer.id,
        label=label,
        address_encrypted=service.encrypt_pii(address, ADDRESS, public_id),
        delivery_notes_encrypted=(
            service.encrypt_pii(delivery_notes, DELIVERY_NOTES, public_id) if delivery_notes else None
        ),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_shipping_addresses(db: Session, service: EncryptionService, customer: Customer) -> list[dict]:
    public_id = customer.public_id
    rows = (
        db.query(ShippingAddress)
        .filter(ShippingAddress.customer_id == customer.id)
        .order_by(ShippingAddress.id)
        .all()
    )
    addresses = []
    for row in rows:
        notes = None
        if row.delivery_notes_encrypted:
            notes = service.decrypt_pii(row.delivery_notes_encrypted, DELIVERY_NOTES, public_id)
        addresses.append({
            "id": row.id,
            "label": row.label,
            "address": service.decrypt_pii(row.address_encrypted, ADDRESS, public_id),
            "delivery_notes": notes,
        })
    return addresses


def issue_verification_code(db: Session, service: EncryptionService, customer: Customer) -> str:
    """Create a one-time code; only its hash is stored. Returns the plain code for delivery.

    Earlier pending codes are consumed, so at most one code is ever live per customer.
    """
    key = customer.public_id
    if issue_limiter.is_locked(key):
        logger.warning("verification issue throttled public_id=%s", key)
        raise VerificationLockedError("Too many verification requests")
    issue_limiter.record_attempt(key)

    db.query(VerificationCode).filter(
        VerificationCode.customer_id == customer.id,
        VerificationCode.consumed == False,  # noqa: E712
    ).update({VerificationCode.consumed: True}, synchronize_session=False)

    code = service.generate_numeric_code(VERIFICATION_CODE_LENGTH)
    hashed = service.hash(code)
    db.add(VerificationCode(
        customer_id=customer.id,
        code_hash=hashed.hash,
        code_salt=hashed.salt,
        expires_at=datetime.datetime.utcnow() + VERIFICATION_CODE_TTL,
    ))
    db.commit()
    logger.info("verification code issued public_id=%s", key)
    return code


def confirm_verification_code(db: Session, service: EncryptionService, customer: Customer, code: str) -> bool:
    key = customer.public_id
    if confirm_limiter.is_locked(key):
        logger.warning("verification locked public_id=%s", key)
        raise VerificationLockedError("Too many failed verification attempts")

    now = datetime.datetime.utcnow()
    pending = (
        db.query(VerificationCode)
        .filter(
            VerificationCode.customer_id == customer.id,
            VerificationCode.consumed == False,  # noqa: E712
            VerificationCode.expires_at > now,
        )
        .order_by(VerificationCode.id.desc())
        .first()
    )
    if pending is not None and service.verify_hash(code, pending.code_hash, pending.code_salt):
        pending.consumed = True
        customer.is_verified = True
        db.commit()
        confirm_limiter.reset(key)
        return True

    confirm_limiter.record_attempt(key)
    logger.warning("verification failed public_id=%s", key)
    return False
