"""Tests for Category API endpoints."""
from unittest.mock import patch

from inventory.services.category_service import CategoryService


def test_create_category(client):
    """Test creating a new category."""
    response = client.post("/api/categorias", json={"nombre": "Electrónica"})

    assert response.status_code == 201
    data = response.json()
    assert data["nombre"] == "Electrónica"
    assert isinstance(data["id"], int)


def test_create_category_blank_name(client):
    """Test a blank name is rejected."""
    response = client.post("/api/categorias", json={"nombre": "  "})

    assert response.status_code == 400
    assert response.json()["error"] == "El nombre de la categoría es obligatorio"


def test_create_category_missing_name(client):
    response = client.post("/api/categorias", json={})

    assert response.status_code == 400


def test_create_duplicate_category(client):
    """Test a duplicate name is reported as a conflict."""
    client.post("/api/categorias", json={"nombre": "Oficina"})

    response = client.post("/api/categorias", json={"nombre": "Oficina"})

    assert response.status_code == 409
    assert response.json()["error"] == "Ya existe una categoría con ese nombre"


def test_create_category_lost_race_is_generic_failure(client):
    """Test a duplicate slipping past the pre-check surfaces as a 500."""
    client.post("/api/categorias", json={"nombre": "Oficina"})

    with patch.object(CategoryService, "_name_taken", return_value=False):
        response = client.post("/api/categorias", json={"nombre": "Oficina"})

    assert response.status_code == 500
    assert response.json()["error"] == "Error al crear categoría"


def test_list_categories_ordered_by_name(client):
    for name in ["Oficina", "Electrónica", "Hogar"]:
        client.post("/api/categorias", json={"nombre": name})

    response = client.get("/api/categorias")

    assert response.status_code == 200
    assert [c["nombre"] for c in response.json()] == ["Electrónica", "Hogar", "Oficina"]


def test_get_category(client, category_id):
    response = client.get(f"/api/categorias/{category_id}")

    assert response.status_code == 200
    assert response.json() == {"id": category_id, "nombre": "Electrónica"}


def test_get_category_not_found(client):
    response = client.get("/api/categorias/9999")

    assert response.status_code == 404
    assert response.json()["error"] == "Categoría no encontrada"


def test_rename_category(client, category_id, create_product):
    """Test renaming a category is reflected in its products."""
    product_id = create_product().json()["id"]

    response = client.put(f"/api/categorias/{category_id}", json={"nombre": "Tecnología"})

    assert response.status_code == 200
    assert response.json()["nombre"] == "Tecnología"
    assert client.get(f"/api/productos/{product_id}").json()["categoria"] == "Tecnología"


def test_rename_category_to_own_name(client, category_id):
    """Test keeping the same name is not a conflict."""
    response = client.put(f"/api/categorias/{category_id}", json={"nombre": "Electrónica"})

    assert response.status_code == 200


def test_rename_category_to_existing_name(client, category_id):
    client.post("/api/categorias", json={"nombre": "Oficina"})

    response = client.put(f"/api/categorias/{category_id}", json={"nombre": "Oficina"})

    assert response.status_code == 409
    assert response.json()["error"] == "Ya existe otra categoría con ese nombre"


def test_rename_category_not_found(client):
    response = client.put("/api/categorias/9999", json={"nombre": "Nada"})

    assert response.status_code == 404


def test_delete_category(client, category_id):
    response = client.delete(f"/api/categorias/{category_id}")

    assert response.status_code == 200
    assert response.json()["message"] == "Categoría eliminada correctamente"
    assert client.get(f"/api/categorias/{category_id}").status_code == 404


def test_delete_category_with_products(client, category_id, create_product):
    """Test a category still used by products cannot be deleted."""
    create_product()

    response = client.delete(f"/api/categorias/{category_id}")

    assert response.status_code == 400
    assert "productos asociados" in response.json()["error"]
    assert client.get(f"/api/categorias/{category_id}").status_code == 200


def test_delete_category_not_found(client):
    response = client.delete("/api/categorias/9999")

    assert response.status_code == 404
