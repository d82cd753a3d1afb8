from starlette.requests import Request
from core.config import settings
from middleware.rate_limiter import limiter, get_rate_limit_key
from services.token_service import TokenService


def make_request(headers=None):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/products",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": ("203.0.113.7", 5555),
    }
    return Request(scope)


def test_rate_limiter_disabled_in_testing():
    assert settings.ENV == "testing"
    assert limiter.enabled is False


def test_key_is_client_ip_for_guests():
    assert get_rate_limit_key(make_request()) == "203.0.113.7"


def test_key_is_client_ip_for_bad_token():
    request = make_request({"Authorization": "Bearer nonsense"})

    assert get_rate_limit_key(request) == "203.0.113.7"


def test_key_is_user_for_signed_in_shopper(session, customer):
    tokens = TokenService.issue_tokens(customer, session)
    request = make_request({"Authorization": f"Bearer {tokens['access_token']}"})

    assert get_rate_limit_key(request) == f"user:{customer.id}"


async def test_can_make_multiple_requests_in_tests(client, customer):
    """Login is normally limited to 5/minute."""
    for _ in range(10):
        response = await client.post("/auth/token", data={
            "username": customer.email,
            "password": "TestPassword123!"
        })
        assert response.status_code == 200
