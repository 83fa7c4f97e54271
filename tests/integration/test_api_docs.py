import pytest

pytestmark = pytest.mark.integration


class TestApiDocs:
    def test_schema_lists_order_intake(self, client):
        response = client.get("/api/schema/")
        assert response.status_code == 200
        assert b"/api/orders" in response.content

    def test_swagger_ui(self, client):
        response = client.get("/api/docs/")
        assert response.status_code == 200
