from fastapi.testclient import TestClient


def test_health_check(client: TestClient):
    """
    Test the health check endpoint to ensure the server is responsive.
    """
    response = client.get('/')
    assert response.status_code == 200
    json_data = response.json()
    assert "status" in json_data
    assert json_data["status"] == "ok"
