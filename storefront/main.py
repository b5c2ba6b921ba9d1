from fastapi import FastAPI

from Security.encryption_service import get_encryption_service
from Security.security_logging import get_security_logger

from .database import Base, engine
from .customer_routes import register_customer_routes
from .error_handlers import register_error_handlers
from .middleware import ActivityLoggingMiddleware, RequestIdMiddleware
from .webhook_routes import register_webhook_routes


logger = get_security_logger(root="storefront")

app = FastAPI(title="Storefront PII API")
app.add_middleware(ActivityLoggingMiddleware)
app.add_middleware(RequestIdMiddleware)

register_error_handlers(app)
register_customer_routes(app)
register_webhook_routes(app)


@app.get("/health")
def health():
    return {"status": "ok"}


# On startup, create tables and load the master key once (fails fast in production)
@app.on_event("startup")
def startup_event():
    Base.metadata.create_all(bind=engine)
    get_encryption_service()
    logger.info("storefront started")
