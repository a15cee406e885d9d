"""
Precifix Server - Form Input Schemas
Entradas digitadas pelo usuario: guarda o texto original e expoe o valor
ja convertido. Texto invalido vira erro de validacao (422) em vez de
sumir silenciosamente.
"""
import re
from typing import Union
from pydantic import BaseModel, field_validator

from precifix.core.pricing import (
    AdjustmentType,
    parse_decimal_input,
    parse_dilution_ratio_input,
    parse_hhmm_to_minutes,
)

_HHMM = re.compile(r"^\s*\d{1,3}:[0-5]\d\s*$")


def duration_text_to_minutes(value: Union[str, int, float]) -> int:
    """Aceita minutos (int) ou "HH:MM"; formato invalido levanta ValueError"""
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError("duration must not be negative")
        return int(value)
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    if not _HHMM.match(text):
        raise ValueError("duration must be minutes or HH:MM")
    return parse_hhmm_to_minutes(text)


def dilution_text_to_ratio(value: Union[str, int, float]) -> float:
    """Aceita "1:X" ou X; proporcao <= 0 levanta ValueError"""
    ratio = float(value) if isinstance(value, (int, float)) else parse_dilution_ratio_input(str(value))
    if ratio <= 0:
        raise ValueError("dilution must be 1:X with X > 0")
    return ratio


class AdjustmentInput(BaseModel):
    """Comissao ou desconto: valor digitado + tipo (R$ ou %)"""
    value: Union[str, float] = "0"
    type: AdjustmentType = AdjustmentType.AMOUNT

    @field_validator("value")
    @classmethod
    def not_negative(cls, v):
        if parse_decimal_input(v) < 0:
            raise ValueError("value must not be negative")
        return v

    def amount(self) -> float:
        return parse_decimal_input(self.value)


class DurationInput(BaseModel):
    value: Union[str, int]

    @field_validator("value")
    @classmethod
    def valid_duration(cls, v):
        duration_text_to_minutes(v)
        return v

    def minutes(self) -> int:
        return duration_text_to_minutes(self.value)


class DilutionInput(BaseModel):
    value: Union[str, float]

    @field_validator("value")
    @classmethod
    def valid_dilution(cls, v):
        dilution_text_to_ratio(v)
        return v

    def ratio(self) -> float:
        return dilution_text_to_ratio(self.value)
