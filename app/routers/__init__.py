# app/routers/__init__.py

from .auth.auth_router import router as auth_router

from .billing.quote_router import router as quote_router
from .billing.invoice_router import router as invoice_router


__all__ = [
"auth_router",

"quote_router",
"invoice_router",
]
