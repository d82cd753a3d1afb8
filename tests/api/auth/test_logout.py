from models.refresh_tokens import RefreshToken
from services.token_service import TokenService


async def test_logout_revokes_refresh_token(client, session, customer):
    tokens = TokenService.issue_tokens(customer, session)

    response = await client.post("/auth/logout", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    stored = session.query(RefreshToken).filter(RefreshToken.user_id == customer.id).one()
    session.refresh(stored)
    assert stored.revoked is True
    assert stored.revoked_at is not None

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 401


async def test_logout_twice(client, session, customer):
    tokens = TokenService.issue_tokens(customer, session)

    await client.post("/auth/logout", json={"refresh_token": tokens["refresh_token"]})
    response = await client.post("/auth/logout", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200


async def test_logout_with_unreadable_token(client):
    response = await client.post("/auth/logout", json={"refresh_token": "garbage"})

    assert response.status_code == 200
