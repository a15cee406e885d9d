"""
Precifix Server - Pricing
Calculo de custo de produtos, custo por hora e totais de orcamento.

Todas as funcoes deste modulo sao puras: nao acessam banco nem rede.
Entradas numericas degeneradas (volume zero, diluicao zero, textos
invalidos) resultam em 0, nunca em excecao. A unica excecao e a margem
desejada, que precisa estar em [0, 100).
"""
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional


class ProductType(str, Enum):
    """Tipo de produto do catalogo"""
    DILUTED = "diluted"
    READY_TO_USE = "ready-to-use"


class AdjustmentType(str, Enum):
    """Forma de informar comissao e desconto"""
    AMOUNT = "amount"
    PERCENTAGE = "percentage"


class PaymentMethodType(str, Enum):
    """Tipos de forma de pagamento"""
    CASH = "cash"
    PIX = "pix"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"


class ProductCostMethod(str, Enum):
    """Como o custo de produtos entra no orcamento"""
    PER_SERVICE = "per-service"          # soma produtos de cada servico
    MONTHLY_AVERAGE = "monthly-average"  # produtos ja estao nos custos mensais


# Custo operacional que, quando existe, liga o modo "monthly-average"
MONTHLY_PRODUCTS_COST_DESCRIPTION = "Produtos Gastos no Mês"

WEEKS_PER_MONTH = 4
LUNCH_BREAK_MINUTES = 60
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


# ============================================================
# TIPOS DE ENTRADA / SAIDA
# ============================================================

@dataclass
class ProductForCalculation:
    gallon_price: float
    gallon_volume_ml: float
    dilution_ratio: float
    usage_per_vehicle_ml: float
    type: ProductType = ProductType.READY_TO_USE
    container_size_ml: float = 0.0

    @classmethod
    def from_catalog(cls, price: float, size_liters: float, dilution_ratio: float,
                     usage_per_vehicle: float, type: str, container_size: float = 0.0):
        """Monta a partir dos campos do catalogo (tamanho da embalagem em litros)"""
        return cls(
            gallon_price=price or 0.0,
            gallon_volume_ml=(size_liters or 0.0) * 1000,
            dilution_ratio=dilution_ratio or 0.0,
            usage_per_vehicle_ml=usage_per_vehicle or 0.0,
            type=ProductType(type),
            container_size_ml=container_size or 0.0,
        )


@dataclass
class ServiceForCalculation:
    """Servico com os valores efetivos (overrides do orcamento ja aplicados)"""
    price: float
    labor_cost_per_hour: float = 0.0
    execution_time_minutes: float = 0.0
    other_costs: float = 0.0
    products: List[ProductForCalculation] = field(default_factory=list)


@dataclass
class PaymentMethodForCalculation:
    type: PaymentMethodType
    rate: float = 0.0
    installments: Dict[int, float] = field(default_factory=dict)  # parcelas -> taxa %


@dataclass
class OperationalCostEntry:
    value: float
    type: str = "fixed"  # fixed | variable


@dataclass
class OperationalHoursDay:
    start: Optional[str] = None
    end: Optional[str] = None


@dataclass
class HourlyCostBreakdown:
    fixed_costs: float
    variable_costs: float
    total_monthly_expenses: float
    working_days_in_month: int
    weekly_worked_minutes: int
    average_daily_hours: float
    daily_cost: float
    hourly_cost: float


@dataclass
class ServiceProfitability:
    products_cost: float
    labor_cost: float
    other_costs: float
    total_cost: float
    profit: float
    margin_pct: float


@dataclass
class QuoteTotals:
    total_service_value: float
    total_execution_minutes: float
    total_products_cost: float
    total_labor_cost: float
    total_other_costs: float
    other_costs_global: float
    calculated_commission: float
    calculated_discount: float
    total_cost: float
    value_after_discount: float
    payment_fee: float
    final_price_with_fee: float
    net_profit: float
    margin_pct: float
    suggested_price: float
    product_cost_method: ProductCostMethod


# ============================================================
# CONVERSORES DE TEXTO
# ============================================================

def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _parse_float_prefix(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return 0.0
    return _finite(float(match.group(0)))


def _parse_int_prefix(text: str) -> Optional[int]:
    match = _INT_PREFIX.match(text)
    if not match:
        return None
    return int(match.group(0))


def parse_decimal_input(raw) -> float:
    """
    Converte texto digitado ("12,50", "10", "7.5abc") em float.
    Primeira virgula vira ponto; o maior prefixo numerico e usado; invalido -> 0.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        return _finite(float(raw))
    return _parse_float_prefix(str(raw).replace(",", ".", 1))


def parse_dilution_ratio_input(raw: Optional[str]) -> float:
    """"1:100" -> 100, "100" -> 100, texto invalido -> 0"""
    text = raw or ""
    parts = text.split(":")
    if len(parts) == 2 and parts[0].strip() == "1":
        return parse_decimal_input(parts[1].strip())
    return parse_decimal_input(text.strip())


def format_dilution_ratio(ratio: Optional[float]) -> str:
    if not ratio or ratio <= 0:
        return "N/A"
    return f"1:{ratio:g}"


def format_minutes_to_hhmm(total_minutes) -> str:
    """Minutos -> "HH:MM" (negativo ou invalido -> "00:00")"""
    if total_minutes is None:
        return "00:00"
    try:
        minutes_value = int(total_minutes)
    except (TypeError, ValueError):
        return "00:00"
    if minutes_value < 0:
        return "00:00"
    hours, minutes = divmod(minutes_value, 60)
    return f"{hours:02d}:{minutes:02d}"


def parse_hhmm_to_minutes(hhmm: Optional[str]) -> int:
    """"HH:MM" -> minutos. Formato invalido, negativo ou minutos >= 60 -> 0"""
    parts = (hhmm or "").split(":")
    if len(parts) != 2:
        return 0
    hours = _parse_int_prefix(parts[0])
    minutes = _parse_int_prefix(parts[1])
    if hours is None or minutes is None:
        return 0
    if hours < 0 or minutes < 0 or minutes >= 60:
        return 0
    return hours * 60 + minutes


def time_to_minutes(time: Optional[str]) -> int:
    """Horario de funcionamento ("08:30" ou "08:30:00") -> minutos do dia"""
    if not time:
        return 0
    parts = time.split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return 0
    return hours * 60 + minutes


# ============================================================
# CUSTO DE PRODUTOS
# ============================================================

def _cost_per_ml(product: ProductForCalculation) -> float:
    """Custo por ml da solucao usada (pronta ou diluida)"""
    if not product.gallon_volume_ml or product.gallon_volume_ml <= 0:
        return 0.0
    concentrated = product.gallon_price / product.gallon_volume_ml
    if product.type == ProductType.READY_TO_USE:
        return _finite(concentrated)
    # 1:X = 1 parte de produto em X partes da solucao final
    if not product.dilution_ratio or product.dilution_ratio <= 0:
        return 0.0
    return _finite(concentrated / product.dilution_ratio)


def calculate_product_cost(product: ProductForCalculation) -> float:
    """Custo do produto por aplicacao (por veiculo)"""
    cost = _cost_per_ml(product) * (product.usage_per_vehicle_ml or 0.0)
    return max(0.0, _finite(cost))


def calculate_product_cost_per_liter(product: ProductForCalculation) -> float:
    return max(0.0, _finite(_cost_per_ml(product) * 1000))


def calculate_product_cost_per_container(product: ProductForCalculation) -> float:
    """Custo de um borrifador/recipiente de solucao diluida"""
    if product.type != ProductType.DILUTED:
        return 0.0
    if not product.container_size_ml or product.container_size_ml <= 0:
        return 0.0
    return max(0.0, _finite(_cost_per_ml(product) * product.container_size_ml))


# ============================================================
# CUSTO POR HORA
# ============================================================

def calculate_hourly_cost_breakdown(
    costs: Iterable[OperationalCostEntry],
    hours: Mapping[str, OperationalHoursDay]
) -> HourlyCostBreakdown:
    """
    Custo implicito de uma hora de trabalho.

    Soma dos custos mensais dividida pelos dias trabalhados no mes
    (dias ativos x 4 semanas) e depois pela media de horas por dia,
    descontando 1h de almoco em jornadas maiores que 1h.
    """
    fixed_costs = 0.0
    variable_costs = 0.0
    for cost in costs:
        if cost.type == "variable":
            variable_costs += cost.value or 0.0
        else:
            fixed_costs += cost.value or 0.0
    total_monthly_expenses = fixed_costs + variable_costs

    active_days = 0
    weekly_minutes = 0
    days_with_hours = 0
    for day in WEEKDAYS:
        schedule = hours.get(day)
        if schedule is None or not (schedule.start or schedule.end):
            continue
        active_days += 1
        if not (schedule.start and schedule.end):
            continue

        duration = time_to_minutes(schedule.end) - time_to_minutes(schedule.start)
        duration = duration - LUNCH_BREAK_MINUTES if duration > LUNCH_BREAK_MINUTES else 0
        if duration > 0:
            weekly_minutes += duration
            days_with_hours += 1

    working_days_in_month = active_days * WEEKS_PER_MONTH
    average_daily_hours = (weekly_minutes / days_with_hours) / 60 if days_with_hours > 0 else 0.0
    daily_cost = total_monthly_expenses / working_days_in_month if working_days_in_month > 0 else 0.0
    hourly_cost = daily_cost / average_daily_hours if average_daily_hours > 0 else 0.0

    return HourlyCostBreakdown(
        fixed_costs=fixed_costs,
        variable_costs=variable_costs,
        total_monthly_expenses=total_monthly_expenses,
        working_days_in_month=working_days_in_month,
        weekly_worked_minutes=weekly_minutes,
        average_daily_hours=average_daily_hours,
        daily_cost=daily_cost,
        hourly_cost=_finite(hourly_cost),
    )


def calculate_hourly_cost(
    costs: Iterable[OperationalCostEntry],
    hours: Mapping[str, OperationalHoursDay]
) -> float:
    return calculate_hourly_cost_breakdown(costs, hours).hourly_cost


# ============================================================
# ORCAMENTO
# ============================================================

def service_products_cost(service: ServiceForCalculation) -> float:
    return sum(calculate_product_cost(p) for p in service.products)


def service_labor_cost(service: ServiceForCalculation) -> float:
    minutes = service.execution_time_minutes or 0.0
    return (minutes / 60) * (service.labor_cost_per_hour or 0.0)


def calculate_service_profitability(service: ServiceForCalculation) -> ServiceProfitability:
    """Lucro de um servico do catalogo vendido pelo preco cheio"""
    products_cost = service_products_cost(service)
    labor_cost = service_labor_cost(service)
    other_costs = service.other_costs or 0.0
    total_cost = products_cost + labor_cost + other_costs
    profit = (service.price or 0.0) - total_cost
    margin_pct = profit / service.price * 100 if service.price and service.price > 0 else 0.0
    return ServiceProfitability(
        products_cost=products_cost,
        labor_cost=labor_cost,
        other_costs=other_costs,
        total_cost=total_cost,
        profit=profit,
        margin_pct=margin_pct,
    )


def calculate_commission(total_service_value: float, value: float,
                         type: AdjustmentType = AdjustmentType.AMOUNT) -> float:
    """Comissao sobre o valor dos servicos (antes do desconto)"""
    if AdjustmentType(type) == AdjustmentType.AMOUNT:
        return value
    return total_service_value * (value / 100)


def calculate_discount(total_service_value: float, value: float,
                       type: AdjustmentType = AdjustmentType.AMOUNT) -> float:
    """Desconto limitado a [0, total_service_value]"""
    if AdjustmentType(type) == AdjustmentType.AMOUNT:
        discount = value
    else:
        discount = total_service_value * (value / 100)
    return max(0.0, min(discount, total_service_value))


def resolve_installment_rate(method: PaymentMethodForCalculation,
                             installments: Optional[int]) -> float:
    """Taxa da parcela escolhida; sem escolha (ou parcela inexistente) usa a de 1x"""
    if installments and installments in method.installments:
        return method.installments[installments]
    return method.installments.get(1, 0.0)


def calculate_payment_fee(value_after_discount: float,
                          method: Optional[PaymentMethodForCalculation],
                          installments: Optional[int] = None) -> float:
    if method is None or value_after_discount <= 0:
        return 0.0

    method_type = PaymentMethodType(method.type)
    if method_type in (PaymentMethodType.CASH, PaymentMethodType.PIX):
        return 0.0
    if method_type == PaymentMethodType.DEBIT_CARD:
        return value_after_discount * ((method.rate or 0.0) / 100)
    return value_after_discount * (resolve_installment_rate(method, installments) / 100)


def calculate_suggested_price(total_cost: float, desired_margin_pct: float) -> float:
    """
    Preco que entrega a margem desejada sobre o custo total.

    A margem precisa estar em [0, 100): em 100% ou mais o divisor zera
    ou fica negativo e o preco deixa de existir.
    """
    if desired_margin_pct < 0 or desired_margin_pct >= 100:
        raise ValueError("desired margin must be >= 0 and < 100")
    if desired_margin_pct == 0:
        return total_cost
    return total_cost / (1 - desired_margin_pct / 100)


def calculate_quote_totals(
    services: List[ServiceForCalculation],
    other_costs_global: float = 0.0,
    commission_value: float = 0.0,
    commission_type: AdjustmentType = AdjustmentType.AMOUNT,
    discount_value: float = 0.0,
    discount_type: AdjustmentType = AdjustmentType.AMOUNT,
    payment_method: Optional[PaymentMethodForCalculation] = None,
    installments: Optional[int] = None,
    desired_margin_pct: float = 40.0,
    product_cost_method: ProductCostMethod = ProductCostMethod.PER_SERVICE,
) -> QuoteTotals:
    """Totais, custo, lucro e margem de um orcamento"""
    product_cost_method = ProductCostMethod(product_cost_method)

    total_service_value = sum(s.price or 0.0 for s in services)
    total_execution_minutes = sum(s.execution_time_minutes or 0.0 for s in services)
    if product_cost_method == ProductCostMethod.PER_SERVICE:
        total_products_cost = sum(service_products_cost(s) for s in services)
    else:
        total_products_cost = 0.0
    total_labor_cost = sum(service_labor_cost(s) for s in services)
    total_other_costs = sum(s.other_costs or 0.0 for s in services)

    calculated_commission = calculate_commission(total_service_value, commission_value, commission_type)
    calculated_discount = calculate_discount(total_service_value, discount_value, discount_type)

    total_cost = (
        total_products_cost
        + total_labor_cost
        + total_other_costs
        + other_costs_global
        + calculated_commission
    )
    value_after_discount = total_service_value - calculated_discount
    payment_fee = calculate_payment_fee(value_after_discount, payment_method, installments)

    final_price_with_fee = value_after_discount - payment_fee
    net_profit = final_price_with_fee - total_cost
    margin_pct = net_profit / final_price_with_fee * 100 if final_price_with_fee > 0 else 0.0

    return QuoteTotals(
        total_service_value=total_service_value,
        total_execution_minutes=total_execution_minutes,
        total_products_cost=total_products_cost,
        total_labor_cost=total_labor_cost,
        total_other_costs=total_other_costs,
        other_costs_global=other_costs_global,
        calculated_commission=calculated_commission,
        calculated_discount=calculated_discount,
        total_cost=total_cost,
        value_after_discount=value_after_discount,
        payment_fee=payment_fee,
        final_price_with_fee=final_price_with_fee,
        net_profit=net_profit,
        margin_pct=margin_pct,
        suggested_price=calculate_suggested_price(total_cost, desired_margin_pct),
        product_cost_method=product_cost_method,
    )


# ============================================================
# FERRAMENTAS
# ============================================================

@dataclass
class DilutionMix:
    product_ml: float
    water_ml: float
    container_size_ml: float


def calculate_dilution_mix(product_part: float, water_part: float,
                           container_size_ml: float) -> DilutionMix:
    """Quanto de produto e de agua vao em um recipiente na proporcao produto:agua"""
    total_parts = (product_part or 0) + (water_part or 0)
    if total_parts <= 0 or not container_size_ml or container_size_ml <= 0:
        return DilutionMix(product_ml=0.0, water_ml=0.0, container_size_ml=container_size_ml or 0.0)
    one_part = container_size_ml / total_parts
    return DilutionMix(
        product_ml=one_part * product_part,
        water_ml=one_part * water_part,
        container_size_ml=container_size_ml,
    )
