from fastapi import Request

from packages.subscribers.services.subscriber_service import SubscriberService


def get_subscriber_service(request: Request) -> SubscriberService:
    """Subscriber service built once at startup (see api.main.create_app)."""
    return request.app.state.subscriber_service
