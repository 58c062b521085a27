"""
Django Ninja API configuration.
"""

from django.http import HttpRequest
from ninja import NinjaAPI

from apps.accounts.api import router as auth_router
from apps.billing.api import router as billing_router
from apps.inquiries.api import router as inquiries_router
from apps.properties.api import router as properties_router

api = NinjaAPI(
    title="StudyNest API",
    version="1.0.0",
    description="Student accommodation marketplace with Stytch authentication and Stripe rent payments.",
    openapi_extra={
        "tags": [
            {"name": "auth", "description": "Current user, role selection and profile setup"},
            {"name": "properties", "description": "Property listings"},
            {"name": "inquiries", "description": "Student inquiries and message threads"},
            {"name": "billing", "description": "Rent checkout, billing portal and payment history"},
            {"name": "health", "description": "Service health checks"},
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Stytch session JWT. Include as: Authorization: Bearer <session_jwt>",
                }
            }
        },
    },
)

api.add_router("/auth", auth_router)
api.add_router("/properties", properties_router)
api.add_router("/inquiries", inquiries_router)
api.add_router("/billing", billing_router)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
