"""
Servico de Consultas Externas

- ViaCEP: endereco a partir do CEP
- FIPE (parallelum): marcas, modelos, anos e valor de veiculos

Usa httpx.AsyncClient com timeout configuravel (HTTP_TIMEOUT).
"""

import logging
import re
from typing import List

import httpx

from precifix.core import settings

logger = logging.getLogger(__name__)

CEP_NOT_FOUND_MESSAGE = "CEP não encontrado. Preencha o endereço manualmente."
CEP_INVALID_MESSAGE = "CEP inválido. Informe 8 dígitos."
CEP_UNAVAILABLE_MESSAGE = "Consulta de CEP indisponível. Preencha o endereço manualmente."


class UpstreamLookupError(Exception):
    """Falha ao consultar servico externo"""


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT, follow_redirects=True)


async def _get_json(url: str):
    try:
        async with _http_client() as client:
            response = await client.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            return response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Consulta externa falhou ({url}): {e}")
        raise UpstreamLookupError(str(e)) from e


def _blank_address(cep: str, message: str) -> dict:
    return {
        "found": False,
        "cep": cep,
        "address": "",
        "complement": "",
        "neighborhood": "",
        "city": "",
        "state": "",
        "message": message,
    }


async def lookup_cep(cep: str) -> dict:
    """Endereco do CEP; qualquer falha vira found=False com aviso"""
    digits = re.sub(r"\D", "", cep or "")
    if len(digits) != 8:
        return _blank_address(digits, CEP_INVALID_MESSAGE)

    try:
        data = await _get_json(f"{settings.VIACEP_URL}/{digits}/json/")
    except UpstreamLookupError:
        return _blank_address(digits, CEP_UNAVAILABLE_MESSAGE)

    if not isinstance(data, dict) or data.get("erro"):
        return _blank_address(digits, CEP_NOT_FOUND_MESSAGE)

    return {
        "found": True,
        "cep": digits,
        "address": data.get("logradouro") or "",
        "complement": data.get("complemento") or "",
        "neighborhood": data.get("bairro") or "",
        "city": data.get("localidade") or "",
        "state": data.get("uf") or "",
        "message": None,
    }


def _fipe_items(data) -> List[dict]:
    return [{"code": str(item.get("codigo")), "name": item.get("nome", "")} for item in data or []]


async def fipe_brands(vehicle_type: str) -> List[dict]:
    data = await _get_json(f"{settings.FIPE_URL}/{vehicle_type}/marcas")
    return _fipe_items(data)


async def fipe_models(vehicle_type: str, brand_code: str) -> List[dict]:
    data = await _get_json(f"{settings.FIPE_URL}/{vehicle_type}/marcas/{brand_code}/modelos")
    return _fipe_items((data or {}).get("modelos"))


async def fipe_years(vehicle_type: str, brand_code: str, model_code: str) -> List[dict]:
    data = await _get_json(
        f"{settings.FIPE_URL}/{vehicle_type}/marcas/{brand_code}/modelos/{model_code}/anos"
    )
    return _fipe_items(data)


async def fipe_vehicle(vehicle_type: str, brand_code: str, model_code: str, year_code: str) -> dict:
    data = await _get_json(
        f"{settings.FIPE_URL}/{vehicle_type}/marcas/{brand_code}/modelos/{model_code}/anos/{year_code}"
    ) or {}
    return {
        "brand": data.get("Marca", ""),
        "model": data.get("Modelo", ""),
        "year": int(data.get("AnoModelo") or 0),
        "fuel": data.get("Combustivel", ""),
        "fipe_code": data.get("CodigoFipe", ""),
        "price": data.get("Valor", ""),
        "reference_month": (data.get("MesReferencia") or "").strip(),
    }
