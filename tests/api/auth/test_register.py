from models.users import User


async def test_register_success(client, session):
    response = await client.post("/auth/", json={
        "email": "New.Shopper@Example.com",
        "username": "new_shopper",
        "password": "Secret123",
        "full_name": "Youssef Trabelsi",
        "phone_number": "98 123 456",
        "address": "5 Avenue Habib Bourguiba, Sousse"
    })

    assert response.status_code == 201

    data = response.json()
    assert data["email"] == "new.shopper@example.com"
    assert data["username"] == "new_shopper"
    assert data["phone_number"] == "+21698123456"
    assert "hashed_password" not in data
    assert "password" not in data

    user = session.query(User).filter(User.email == "new.shopper@example.com").first()
    assert user is not None
    assert user.hashed_password != "Secret123"
    assert user.is_active is True


async def test_register_duplicate_email(client, customer):
    response = await client.post("/auth/", json={
        "email": customer.email,
        "username": "someone_else",
        "password": "Secret123"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Email already registered"


async def test_register_duplicate_username(client, customer):
    response = await client.post("/auth/", json={
        "email": "other@example.com",
        "username": customer.username,
        "password": "Secret123"
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Username already registered"


async def test_register_weak_password(client):
    response = await client.post("/auth/", json={
        "email": "weak@example.com",
        "username": "weak",
        "password": "short"
    })

    assert response.status_code == 422


async def test_register_password_without_digit(client):
    response = await client.post("/auth/", json={
        "email": "letters@example.com",
        "username": "letters",
        "password": "OnlyLettersHere"
    })

    assert response.status_code == 422


async def test_register_invalid_phone(client):
    response = await client.post("/auth/", json={
        "email": "phone@example.com",
        "username": "phone",
        "password": "Secret123",
        "phone_number": "12"
    })

    assert response.status_code == 422


async def test_register_invalid_username(client):
    response = await client.post("/auth/", json={
        "email": "spaces@example.com",
        "username": "has spaces",
        "password": "Secret123"
    })

    assert response.status_code == 422
