"""Tests for user endpoints."""

from fastapi.testclient import TestClient


class TestUsers:
    """Tests for /usuarios."""

    def test_create_user(self, client: TestClient):
        response = client.post(
            "/usuarios", json={"nomeUsuario": "ana", "nome": "Ana Lima", "email": "Ana@Example.com"}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["nomeUsuario"] == "ana"
        assert data["nome"] == "Ana Lima"
        assert data["email"] == "ana@example.com"
        assert data["ativo"] is True

    def test_duplicate_username(self, client: TestClient, test_user: dict):
        response = client.post("/usuarios", json={"nomeUsuario": test_user["username"], "nome": "Outra"})
        assert response.status_code == 400
        assert "nomeUsuario" in response.json()["fields"]

    def test_duplicate_email(self, client: TestClient, test_user: dict):
        response = client.post(
            "/usuarios", json={"nomeUsuario": "outra", "nome": "Outra", "email": "maria@example.com"}
        )
        assert response.status_code == 400
        assert "email" in response.json()["fields"]

    def test_short_username(self, client: TestClient):
        response = client.post("/usuarios", json={"nomeUsuario": "ab", "nome": "Ab"})
        assert response.status_code == 400
        assert "nomeUsuario" in response.json()["fields"]

    def test_get_user(self, client: TestClient, test_user: dict):
        response = client.get(f"/usuarios/{test_user['user_id']}")
        assert response.status_code == 200
        assert response.json()["nomeUsuario"] == "maria"

    def test_get_missing_user(self, client: TestClient):
        assert client.get("/usuarios/999").status_code == 404

    def test_list_users(self, client: TestClient, test_user: dict, other_user: dict):
        names = [u["nome"] for u in client.get("/usuarios").json()]
        assert names == ["Joao Souza", "Maria Silva"]

    def test_username_with_wildcard_is_not_a_duplicate(self, client: TestClient):
        assert client.post("/usuarios", json={"nomeUsuario": "abc", "nome": "Abc"}).status_code == 201
        response = client.post("/usuarios", json={"nomeUsuario": "a_c", "nome": "A c"})
        assert response.status_code == 201

    def test_email_with_wildcard_is_not_a_duplicate(self, client: TestClient):
        client.post("/usuarios", json={"nomeUsuario": "joao1", "nome": "Joao", "email": "joaoXsilva@example.com"})
        response = client.post(
            "/usuarios", json={"nomeUsuario": "joao2", "nome": "Joao", "email": "joao_silva@example.com"}
        )
        assert response.status_code == 201

    def test_username_check_ignores_case(self, client: TestClient, test_user: dict):
        response = client.post("/usuarios", json={"nomeUsuario": "MARIA", "nome": "Outra"})
        assert response.status_code == 400

    def test_get_by_username(self, client: TestClient, test_user: dict):
        response = client.get("/usuarios/nome-usuario/maria")
        assert response.status_code == 200
        assert response.json()["id"] == test_user["user_id"]
        assert client.get("/usuarios/nome-usuario/ninguem").status_code == 404

    def test_update_user(self, client: TestClient, test_user: dict):
        response = client.put(
            f"/usuarios/{test_user['user_id']}",
            json={"nomeUsuario": "maria", "nome": "Maria S.", "email": "nova@example.com"},
        )
        assert response.status_code == 200
        assert response.json()["nome"] == "Maria S."
        assert response.json()["email"] == "nova@example.com"

    def test_update_rejects_taken_username(self, client: TestClient, test_user: dict, other_user: dict):
        response = client.put(
            f"/usuarios/{test_user['user_id']}", json={"nomeUsuario": other_user["username"], "nome": "Maria"}
        )
        assert response.status_code == 400
        assert "nomeUsuario" in response.json()["fields"]

    def test_update_missing_user(self, client: TestClient):
        response = client.put("/usuarios/999", json={"nomeUsuario": "ninguem", "nome": "Ninguem"})
        assert response.status_code == 404

    def test_deactivate_user(self, client: TestClient, test_user: dict, other_user: dict):
        assert client.delete(f"/usuarios/{test_user['user_id']}").status_code == 204

        names = [u["nome"] for u in client.get("/usuarios").json()]
        assert names == ["Joao Souza"]
        assert client.get(f"/usuarios/{test_user['user_id']}").json()["ativo"] is False

    def test_deactivate_missing_user(self, client: TestClient):
        assert client.delete("/usuarios/999").status_code == 404
