async def test_get_me(client, customer, auth_headers):
    response = await client.get("/users/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == customer.id
    assert data["email"] == "shopper@example.com"
    assert data["username"] == "shopper"
    assert data["address"] == "12 Rue de Marseille, Tunis"
    assert "hashed_password" not in data


async def test_get_me_without_token(client):
    response = await client.get("/users/me")

    assert response.status_code == 401


async def test_get_me_with_invalid_token(client):
    response = await client.get("/users/me", headers={"Authorization": "Bearer invalid"})

    assert response.status_code == 401


async def test_get_me_inactive_user(client, session, customer, auth_headers):
    customer.is_active = False
    session.commit()

    response = await client.get("/users/me", headers=auth_headers)

    assert response.status_code == 404
