import httpx
import pytest

from precifix.core import settings
from precifix.services import lookup_service


@pytest.fixture
def fake_upstream(monkeypatch):
    """
    Respostas por sufixo do caminho: dict/list vira JSON 200, int vira
    status HTTP, bytes vira corpo cru, excecao httpx e levantada pelo transporte.
    """
    responses = {}

    def handler(request: httpx.Request) -> httpx.Response:
        for suffix, payload in responses.items():
            if request.url.path.endswith(suffix):
                if isinstance(payload, Exception):
                    raise payload
                if isinstance(payload, bytes):
                    return httpx.Response(200, content=payload, request=request)
                if isinstance(payload, int):
                    return httpx.Response(payload, request=request)
                return httpx.Response(200, json=payload, request=request)
        return httpx.Response(404, request=request)

    monkeypatch.setattr(
        lookup_service,
        "_http_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    return responses


def test_cep_found(client, auth_headers, fake_upstream):
    fake_upstream["/80010000/json/"] = {
        "cep": "80010-000",
        "logradouro": "Praça Tiradentes",
        "bairro": "Centro",
        "localidade": "Curitiba",
        "uf": "PR",
    }
    response = client.get("/api/lookups/cep/80010-000", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["found"] is True
    assert data["city"] == "Curitiba"
    assert data["address"] == "Praça Tiradentes"


def test_cep_not_found_degrades(client, auth_headers, fake_upstream):
    fake_upstream["/00000000/json/"] = {"erro": True}
    data = client.get("/api/lookups/cep/00000000", headers=auth_headers).json()
    assert data["found"] is False
    assert data["address"] == ""
    assert data["message"]


def test_cep_upstream_failure_degrades(client, auth_headers, fake_upstream):
    fake_upstream["/80010000/json/"] = httpx.ReadTimeout("timeout")
    data = client.get("/api/lookups/cep/80010000", headers=auth_headers).json()
    assert data["found"] is False
    assert data["message"]


def test_cep_invalid(client, auth_headers, fake_upstream):
    data = client.get("/api/lookups/cep/123", headers=auth_headers).json()
    assert data["found"] is False


def test_fipe_brands(client, auth_headers, fake_upstream):
    fake_upstream["/carros/marcas"] = [{"codigo": "21", "nome": "Fiat"}, {"codigo": 25, "nome": "Honda"}]
    data = client.get("/api/lookups/fipe/carros/brands", headers=auth_headers).json()
    assert data == [{"code": "21", "name": "Fiat"}, {"code": "25", "name": "Honda"}]


def test_fipe_models_and_vehicle(client, auth_headers, fake_upstream):
    fake_upstream["/motos/marcas/80/modelos"] = {"modelos": [{"codigo": 5, "nome": "CG 160"}], "anos": []}
    fake_upstream["/motos/marcas/80/modelos/5/anos/2020-1"] = {
        "Valor": "R$ 12.000,00",
        "Marca": "HONDA",
        "Modelo": "CG 160",
        "AnoModelo": 2020,
        "Combustivel": "Gasolina",
        "CodigoFipe": "811001-1",
        "MesReferencia": "março de 2026 ",
    }

    models = client.get("/api/lookups/fipe/motos/brands/80/models", headers=auth_headers).json()
    assert models == [{"code": "5", "name": "CG 160"}]

    vehicle = client.get(
        "/api/lookups/fipe/motos/brands/80/models/5/years/2020-1", headers=auth_headers
    ).json()
    assert vehicle["price"] == "R$ 12.000,00"
    assert vehicle["year"] == 2020
    assert vehicle["reference_month"] == "março de 2026"


def test_fipe_failure_is_502(client, auth_headers, fake_upstream):
    response = client.get("/api/lookups/fipe/caminhoes/brands", headers=auth_headers)
    assert response.status_code == 502


def test_fipe_invalid_type_is_422(client, auth_headers, fake_upstream):
    response = client.get("/api/lookups/fipe/barcos/brands", headers=auth_headers)
    assert response.status_code == 422


def test_fipe_server_error_is_502(client, auth_headers, fake_upstream):
    fake_upstream["/carros/marcas"] = 500
    response = client.get("/api/lookups/fipe/carros/brands", headers=auth_headers)
    assert response.status_code == 502
    assert "brands" in response.json()["detail"]


def test_fipe_invalid_json_is_502(client, auth_headers, fake_upstream):
    fake_upstream["/carros/marcas/21/modelos"] = b"<html>manutencao</html>"
    response = client.get("/api/lookups/fipe/carros/brands/21/models", headers=auth_headers)
    assert response.status_code == 502


def test_fipe_timeout_is_502(client, auth_headers, fake_upstream):
    fake_upstream["/carros/marcas/21/modelos/5/anos"] = httpx.ConnectTimeout("timeout")
    response = client.get("/api/lookups/fipe/carros/brands/21/models/5/years", headers=auth_headers)
    assert response.status_code == 502


def test_http_client_uses_configured_timeout():
    http_client = lookup_service._http_client()
    assert http_client.timeout == httpx.Timeout(settings.HTTP_TIMEOUT)
