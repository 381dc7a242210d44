"""Tests for stock adjustments."""


def adjust(client, product_id, cambio):
    return client.patch(f"/api/productos/{product_id}/cantidad", json={"cambio": cambio})


def test_inventory_scenario(client, create_product):
    """Test the create, decrement, clamp and not-found sequence end to end."""
    created = create_product(nombre="Mouse", cantidad=5)
    assert created.status_code == 201
    assert created.json()["id"] == "P001"
    assert created.json()["cantidad"] == 5
    assert created.json()["categoria"] == "Electrónica"

    response = adjust(client, "P001", -3)
    assert response.status_code == 200
    assert response.json()["cantidad"] == 2

    response = adjust(client, "P001", -10)
    assert response.status_code == 200
    assert response.json()["cantidad"] == 0

    response = adjust(client, "P999", -1)
    assert response.status_code == 404


def test_increase_quantity(client, create_product):
    """Test a positive delta adds stock and returns the full record."""
    product_id = create_product(cantidad=5).json()["id"]

    response = adjust(client, product_id, 7)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["cantidad"] == 12
    assert data["categoria"] == "Electrónica"


def test_over_decrement_is_clamped_on_retry(client, create_product):
    """Test repeating 'adjust by -5' on quantity 3 yields 0 both times."""
    product_id = create_product(cantidad=3).json()["id"]

    first = adjust(client, product_id, -5)
    second = adjust(client, product_id, -5)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["cantidad"] == 0
    assert second.json()["cantidad"] == 0


def test_decrement_at_zero_succeeds(client, create_product):
    """Test decrementing a product already at zero is not an error."""
    product_id = create_product(cantidad=0).json()["id"]

    response = adjust(client, product_id, -1)

    assert response.status_code == 200
    assert response.json()["cantidad"] == 0


def test_quantity_never_negative(client, create_product):
    """Test quantity stays non-negative through a mixed sequence of adjustments."""
    product_id = create_product(cantidad=4).json()["id"]
    expected = 4

    for delta in [-1, -6, 3, -2, -2, 10, -11, 0, 5]:
        response = adjust(client, product_id, delta)
        expected = max(0, expected + delta)

        assert response.status_code == 200
        assert response.json()["cantidad"] == expected
        stored = client.get(f"/api/productos/{product_id}").json()["cantidad"]
        assert stored == expected >= 0


def test_adjust_missing_delta(client, create_product):
    """Test the delta is required."""
    product_id = create_product().json()["id"]

    response = client.patch(f"/api/productos/{product_id}/cantidad", json={})

    assert response.status_code == 400
    assert "cambio" in response.json()["error"]


def test_adjust_non_integer_delta(client, create_product):
    """Test a fractional delta is rejected."""
    product_id = create_product().json()["id"]

    response = adjust(client, product_id, 1.5)

    assert response.status_code == 400


def test_adjust_unknown_product(client):
    """Test adjusting a non-existent product returns 404."""
    response = adjust(client, "P999", 5)

    assert response.status_code == 404
    assert response.json()["error"] == "Producto no encontrado"


def test_low_stock_notification_dispatched(client, create_product, low_stock_task):
    """Test a decrement reaching the threshold queues a low stock task."""
    product_id = create_product(cantidad=15).json()["id"]

    adjust(client, product_id, -5)

    low_stock_task.assert_called_once_with(product_id)


def test_no_notification_above_threshold(client, create_product, low_stock_task):
    """Test decrements that keep stock above the threshold queue nothing."""
    product_id = create_product(cantidad=15).json()["id"]

    adjust(client, product_id, -4)

    low_stock_task.assert_not_called()


def test_no_notification_on_increase(client, create_product, low_stock_task):
    """Test restocking a low product queues nothing."""
    product_id = create_product(cantidad=1).json()["id"]

    adjust(client, product_id, 2)

    low_stock_task.assert_not_called()


def test_adjust_delta_above_column_range(client, create_product):
    """Test deltas outside the INTEGER range are rejected with 400."""
    product_id = create_product(cantidad=5).json()["id"]

    for cambio in [2**63, -(2**63), 2**31]:
        response = adjust(client, product_id, cambio)

        assert response.status_code == 400
        assert "cambio" in response.json()["error"]

    assert client.get(f"/api/productos/{product_id}").json()["cantidad"] == 5


def test_increase_is_capped_at_column_limit(client, create_product):
    """Test an increment past the INTEGER range caps instead of overflowing."""
    product_id = create_product(cantidad=2_147_483_640).json()["id"]

    response = adjust(client, product_id, 2_147_483_647)

    assert response.status_code == 200
    assert response.json()["cantidad"] == 2_147_483_647
