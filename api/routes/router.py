from fastapi import APIRouter

from packages.subscribers.routes import diagnostics, subscribers
from packages.billing.routes import webhooks

api_router = APIRouter()

# Diagnostics first: /users/test must win over /users/{email}
api_router.include_router(diagnostics.router, tags=["diagnostics"])

# Subscribers (public - used by the signup form and checkout redirect)
api_router.include_router(subscribers.router, tags=["subscribers"])

# Webhooks (no auth - signature verified internally)
api_router.include_router(webhooks.router, tags=["webhooks"])
