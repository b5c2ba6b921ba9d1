from fastapi import Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Optional

from Security.encryption_service import EncryptionService, get_encryption_service

from .database import get_db
from .customer_service import (
    add_shipping_address,
    confirm_verification_code,
    find_customer,
    get_customer_profile,
    get_masked_profile,
    issue_verification_code,
    list_shipping_addresses,
    register_customer,
)


class CustomerIn(BaseModel):
    email: str
    name: str
    phone: Optional[str] = None


class AddressIn(BaseModel):
    address: str
    label: Optional[str] = None
    delivery_notes: Optional[str] = None


class CodeIn(BaseModel):
    code: str


def _get_customer_or_404(db: Session, customer_id: str):
    customer = find_customer(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


def register_customer_routes(app):
    @app.post("/api/customers", status_code=201)
    def create_customer(
        payload: CustomerIn,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        if not payload.email.strip() or not payload.name.strip():
            raise HTTPException(status_code=400, detail="Email and name are required")
        customer = register_customer(db, service, payload.email, payload.name, payload.phone)
        return {"id": customer.public_id}

    @app.get("/api/customers/{customer_id}")
    def read_customer(
        customer_id: str,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        customer = _get_customer_or_404(db, customer_id)
        return get_customer_profile(service, customer)

    @app.get("/api/customers/{customer_id}/masked")
    def read_customer_masked(
        customer_id: str,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        customer = _get_customer_or_404(db, customer_id)
        return get_masked_profile(service, customer)

    @app.post("/api/customers/{customer_id}/addresses", status_code=201)
    def create_address(
        customer_id: str,
        payload: AddressIn,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        customer = _get_customer_or_404(db, customer_id)
        row = add_shipping_address(
            db, service, customer, payload.address, payload.label, payload.delivery_notes
        )
        return {"id": row.id}

    @app.get("/api/customers/{customer_id}/addresses")
    def read_addresses(
        customer_id: str,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        customer = _get_customer_or_404(db, customer_id)
        return {"addresses": list_shipping_addresses(db, service, customer)}

    @app.post("/api/customers/{customer_id}/verification", status_code=202)
    def request_verification(
        customer_id: str,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        customer = _get_customer_or_404(db, customer_id)
        # Code goes out by email/SMS; the response never carries it.
        issue_verification_code(db, service, customer)
        return {"status": "sent"}

    @app.post("/api/customers/{customer_id}/verification/confirm")
    def confirm_verification(
        customer_id: str,
        payload: CodeIn,
        db: Session = Depends(get_db),
        service: EncryptionService = Depends(get_encryption_service),
    ):
        customer = _get_customer_or_404(db, customer_id)
        if not confirm_verification_code(db, service, customer, payload.code.strip()):
            raise HTTPException(status_code=400, detail="Invalid or expired code")
        return {"status": "verified"}
