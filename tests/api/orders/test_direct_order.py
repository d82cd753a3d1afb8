from models.orders import Order


def direct_body(product_id, **overrides):
    body = {
        "fullName": "Amira Ben Salah",
        "phone": "+216 98 123 456",
        "address": "Rue X",
        "governorate": "Tunis",
        "productId": product_id,
        "quantity": 2,
        "price": 89.5,
    }
    body.update(overrides)
    return body


async def test_direct_order_success(client, session, make_product):
    product = make_product(images=("https://cdn.example.com/front.jpg", "https://cdn.example.com/side.jpg"))

    response = await client.post("/orders/direct", json=direct_body(product.id))

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True

    order = data["order"]
    assert order["address"] == "Rue X, Tunis"
    assert order["totalAmount"] == 179.0
    assert order["status"] == "PENDING"
    assert len(order["items"]) == 1
    assert order["items"][0]["quantity"] == 2
    assert order["items"][0]["price"] == 89.5
    # direct purchase returns every image of the product
    assert len(order["items"][0]["product"]["images"]) == 2

    stored = session.query(Order).one()
    assert stored.address == "Rue X, Tunis"


async def test_direct_order_without_governorate(client, make_product):
    product = make_product()
    body = direct_body(product.id)
    del body["governorate"]

    response = await client.post("/orders/direct", json=body)

    assert response.status_code == 200
    assert response.json()["order"]["address"] == "Rue X"


async def test_direct_order_missing_fields(client, session, make_product):
    product = make_product()

    response = await client.post("/orders/direct", json=direct_body(product.id, phone=""))

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"
    assert session.query(Order).count() == 0


async def test_direct_order_unknown_product(client):
    response = await client.post("/orders/direct", json=direct_body(4242))

    assert response.status_code == 404
    assert response.json()["detail"] == "Product not found"


async def test_direct_order_ignores_stock(client, make_product):
    product = make_product(in_stock=False)

    response = await client.post("/orders/direct", json=direct_body(product.id))

    assert response.status_code == 200


async def test_direct_order_linked_to_user(client, make_product, customer, auth_headers):
    product = make_product()

    response = await client.post("/orders/direct", json=direct_body(product.id), headers=auth_headers)

    assert response.json()["order"]["userId"] == customer.id
