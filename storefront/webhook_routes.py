import os

from fastapi import Depends, HTTPException, Request

from Security.encryption_service import EncryptionService, get_encryption_service
from Security.security_logging import get_security_logger


logger = get_security_logger("webhooks", root="storefront")


def register_webhook_routes(app):
    @app.post("/api/webhooks/payments")
    async def payment_webhook(
        request: Request,
        service: EncryptionService = Depends(get_encryption_service),
    ):
        signature = request.headers.get("x-signature", "")
        body = await request.body()
        # Shared secret with the payment provider; master key when unset.
        secret = os.getenv("PAYMENT_WEBHOOK_SECRET") or None
        if not signature or not service.verify_signature(body, signature, secret):
            logger.warning("payment webhook rejected signature=%s", service.mask_data(signature, 4))
            raise HTTPException(status_code=401, detail="Invalid signature")
        return {"status": "accepted"}
