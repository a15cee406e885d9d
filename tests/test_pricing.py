import math

import pytest

from precifix.core.pricing import (
    AdjustmentType,
    OperationalCostEntry,
    OperationalHoursDay,
    PaymentMethodForCalculation,
    PaymentMethodType,
    ProductCostMethod,
    ProductForCalculation,
    ProductType,
    ServiceForCalculation,
    calculate_dilution_mix,
    calculate_discount,
    calculate_hourly_cost,
    calculate_hourly_cost_breakdown,
    calculate_payment_fee,
    calculate_product_cost,
    calculate_product_cost_per_container,
    calculate_product_cost_per_liter,
    calculate_quote_totals,
    calculate_suggested_price,
    format_dilution_ratio,
    format_minutes_to_hhmm,
    parse_decimal_input,
    parse_dilution_ratio_input,
    parse_hhmm_to_minutes,
)


def diluted(price=100.0, volume_ml=5000.0, ratio=100.0, usage=50.0, container=0.0):
    return ProductForCalculation(
        gallon_price=price,
        gallon_volume_ml=volume_ml,
        dilution_ratio=ratio,
        usage_per_vehicle_ml=usage,
        type=ProductType.DILUTED,
        container_size_ml=container,
    )


def ready(price=40.0, volume_ml=1000.0, usage=20.0):
    return ProductForCalculation(
        gallon_price=price,
        gallon_volume_ml=volume_ml,
        dilution_ratio=0,
        usage_per_vehicle_ml=usage,
        type=ProductType.READY_TO_USE,
    )


def week(start="08:00", end="18:00", days=("monday", "tuesday", "wednesday", "thursday", "friday")):
    return {day: OperationalHoursDay(start=start, end=end) for day in days}


class TestTextParsing:
    def test_decimal_accepts_comma(self):
        assert parse_decimal_input("12,50") == 12.5

    def test_decimal_uses_numeric_prefix(self):
        assert parse_decimal_input("7.5abc") == 7.5

    def test_decimal_invalid_is_zero(self):
        assert parse_decimal_input("abc") == 0.0
        assert parse_decimal_input("") == 0.0
        assert parse_decimal_input(None) == 0.0

    def test_dilution_text(self):
        assert parse_dilution_ratio_input("1:100") == 100
        assert parse_dilution_ratio_input("50") == 50
        assert parse_dilution_ratio_input("x:y") == 0

    def test_dilution_plain_number_and_text(self):
        assert parse_dilution_ratio_input("100") == 100
        assert parse_dilution_ratio_input("abc") == 0

    def test_dilution_label(self):
        assert format_dilution_ratio(100) == "1:100"
        assert format_dilution_ratio(0) == "N/A"

    def test_hhmm_round_trip(self):
        for minutes in (0, 5, 59, 60, 90, 600, 6000):
            assert parse_hhmm_to_minutes(format_minutes_to_hhmm(minutes)) == minutes

    def test_hhmm_round_trip_whole_day(self):
        for minutes in range(0, 24 * 60):
            assert parse_hhmm_to_minutes(format_minutes_to_hhmm(minutes)) == minutes

    def test_hhmm_invalid(self):
        assert parse_hhmm_to_minutes("1:75") == 0
        assert parse_hhmm_to_minutes("abc") == 0
        assert parse_hhmm_to_minutes("-1:10") == 0
        assert format_minutes_to_hhmm(-5) == "00:00"


class TestProductCost:
    def test_ready_to_use_twenty_per_liter(self):
        assert calculate_product_cost(ready(price=20, volume_ml=1000, usage=50)) == pytest.approx(1.0)

    def test_ready_to_use_cost_is_proportional_to_usage(self):
        assert calculate_product_cost(ready(price=40, volume_ml=1000, usage=20)) == pytest.approx(0.8)

    def test_diluted_cost_divides_by_ratio(self):
        # 100 / 5000 ml = 0.02 por ml concentrado; 1:100 -> 0.0002 por ml de solucao
        assert calculate_product_cost(diluted(usage=50)) == pytest.approx(0.01)

    def test_degenerate_inputs_cost_zero(self):
        assert calculate_product_cost(diluted(volume_ml=0)) == 0.0
        assert calculate_product_cost(diluted(ratio=0)) == 0.0
        assert calculate_product_cost(diluted(ratio=-3)) == 0.0
        assert calculate_product_cost(ready(usage=0)) == 0.0

    def test_cost_is_never_negative_or_nan(self):
        for product in (diluted(price=-10), ready(price=float("nan")), diluted(volume_ml=-1)):
            cost = calculate_product_cost(product)
            assert cost >= 0
            assert math.isfinite(cost)

    def test_cost_per_liter_and_container(self):
        product = diluted(ratio=100, container=500)
        assert calculate_product_cost_per_liter(product) == pytest.approx(0.2)
        assert calculate_product_cost_per_container(product) == pytest.approx(0.1)

    def test_ready_to_use_has_no_container_cost(self):
        assert calculate_product_cost_per_container(ready()) == 0.0

    def test_from_catalog_converts_liters(self):
        product = ProductForCalculation.from_catalog(
            price=100, size_liters=5, dilution_ratio=100,
            usage_per_vehicle=50, type="diluted"
        )
        assert product.gallon_volume_ml == 5000
        assert calculate_product_cost(product) == pytest.approx(0.01)


class TestHourlyCost:
    def test_standard_week(self):
        costs = [OperationalCostEntry(3000, "fixed"), OperationalCostEntry(1000, "variable")]
        breakdown = calculate_hourly_cost_breakdown(costs, week())
        # 5 dias x 4 semanas = 20 dias; 10h - 1h almoco = 9h/dia
        assert breakdown.working_days_in_month == 20
        assert breakdown.average_daily_hours == pytest.approx(9)
        assert breakdown.daily_cost == pytest.approx(200)
        assert breakdown.hourly_cost == pytest.approx(200 / 9)
        assert breakdown.fixed_costs == 3000
        assert breakdown.variable_costs == 1000

    def test_no_costs_or_no_hours_is_zero(self):
        assert calculate_hourly_cost([], week()) == 0.0
        assert calculate_hourly_cost([OperationalCostEntry(1000)], {}) == 0.0

    def test_short_day_has_no_lunch_discount_and_counts_zero(self):
        hours = {"monday": OperationalHoursDay("08:00", "08:30")}
        assert calculate_hourly_cost([OperationalCostEntry(100)], hours) == 0.0

    def test_closed_days_are_ignored(self):
        hours = week(days=("monday",))
        hours["sunday"] = OperationalHoursDay("", "")
        breakdown = calculate_hourly_cost_breakdown([OperationalCostEntry(400)], hours)
        assert breakdown.working_days_in_month == 4

    def test_accepts_seconds_in_clock(self):
        hours = {"monday": OperationalHoursDay("08:00:00", "12:00:00")}
        breakdown = calculate_hourly_cost_breakdown([OperationalCostEntry(120)], hours)
        assert breakdown.average_daily_hours == pytest.approx(3)
        assert breakdown.hourly_cost == pytest.approx(120 / 4 / 3)


class TestAdjustments:
    def test_discount_clamped_to_total(self):
        assert calculate_discount(100, 150) == 100
        assert calculate_discount(100, 150, AdjustmentType.PERCENTAGE) == 100
        assert calculate_discount(100, -5) == 0

    def test_percentage_discount(self):
        assert calculate_discount(200, 10, AdjustmentType.PERCENTAGE) == pytest.approx(20)

    def test_payment_fee_per_method(self):
        credit = PaymentMethodForCalculation(
            type=PaymentMethodType.CREDIT_CARD,
            installments={1: 3.0, 3: 5.0}
        )
        debit = PaymentMethodForCalculation(type=PaymentMethodType.DEBIT_CARD, rate=2.0)
        pix = PaymentMethodForCalculation(type=PaymentMethodType.PIX, rate=9.0)

        assert calculate_payment_fee(100, credit, 3) == pytest.approx(5)
        assert calculate_payment_fee(100, credit, None) == pytest.approx(3)
        assert calculate_payment_fee(100, credit, 7) == pytest.approx(3)
        assert calculate_payment_fee(100, debit) == pytest.approx(2)
        assert calculate_payment_fee(100, pix) == 0
        assert calculate_payment_fee(100, None) == 0
        assert calculate_payment_fee(0, debit) == 0


class TestSuggestedPrice:
    def test_margin(self):
        assert calculate_suggested_price(60, 40) == pytest.approx(100)

    def test_zero_margin_returns_cost(self):
        assert calculate_suggested_price(60, 0) == 60

    @pytest.mark.parametrize("margin", [100, 120, -1])
    def test_out_of_range_margin_raises(self, margin):
        with pytest.raises(ValueError):
            calculate_suggested_price(60, margin)


class TestQuoteTotals:
    def service(self, price=200.0, minutes=60, labor=30.0, other=5.0, products=None):
        return ServiceForCalculation(
            price=price,
            labor_cost_per_hour=labor,
            execution_time_minutes=minutes,
            other_costs=other,
            products=products if products is not None else [ready(price=40, volume_ml=1000, usage=50)],
        )

    def test_single_service_cash_scenario(self):
        cash = PaymentMethodForCalculation(type=PaymentMethodType.CASH)
        totals = calculate_quote_totals(
            [self.service(price=100, minutes=30, labor=30, other=0, products=[])],
            commission_value=10,
            commission_type=AdjustmentType.AMOUNT,
            payment_method=cash,
        )
        assert totals.total_labor_cost == pytest.approx(15)
        assert totals.calculated_commission == pytest.approx(10)
        assert totals.calculated_discount == 0
        assert totals.payment_fee == 0
        assert totals.total_cost == pytest.approx(25)
        assert totals.net_profit == pytest.approx(75)
        assert totals.margin_pct == pytest.approx(75)

    def test_full_quote(self):
        debit = PaymentMethodForCalculation(type=PaymentMethodType.DEBIT_CARD, rate=2.0)
        totals = calculate_quote_totals(
            [self.service(), self.service(price=100, minutes=30, products=[])],
            other_costs_global=10,
            commission_value=10,
            commission_type=AdjustmentType.PERCENTAGE,
            discount_value=30,
            payment_method=debit,
            desired_margin_pct=40,
        )
        assert totals.total_service_value == 300
        assert totals.total_execution_minutes == 90
        assert totals.total_products_cost == pytest.approx(2)
        assert totals.total_labor_cost == pytest.approx(45)
        assert totals.total_other_costs == pytest.approx(10)
        assert totals.calculated_commission == pytest.approx(30)
        assert totals.calculated_discount == pytest.approx(30)
        assert totals.total_cost == pytest.approx(2 + 45 + 10 + 10 + 30)
        assert totals.value_after_discount == pytest.approx(270)
        assert totals.payment_fee == pytest.approx(5.4)
        assert totals.final_price_with_fee == pytest.approx(264.6)
        assert totals.net_profit == pytest.approx(264.6 - 97)
        assert totals.margin_pct == pytest.approx((264.6 - 97) / 264.6 * 100)
        assert totals.suggested_price == pytest.approx(97 / 0.6)

    def test_totals_identities(self):
        totals = calculate_quote_totals(
            [self.service(price=150, minutes=45)],
            other_costs_global=3,
            commission_value=12,
            discount_value=10,
            discount_type=AdjustmentType.PERCENTAGE,
        )
        assert totals.total_cost == pytest.approx(
            totals.total_products_cost + totals.total_labor_cost + totals.total_other_costs
            + totals.other_costs_global + totals.calculated_commission
        )
        assert totals.net_profit == pytest.approx(totals.final_price_with_fee - totals.total_cost)
        assert 0 <= totals.calculated_discount <= totals.total_service_value

    def test_monthly_average_ignores_products(self):
        services = [self.service()]
        per_service = calculate_quote_totals(services)
        monthly = calculate_quote_totals(services, product_cost_method=ProductCostMethod.MONTHLY_AVERAGE)
        assert per_service.total_products_cost > 0
        assert monthly.total_products_cost == 0
        assert monthly.total_cost == pytest.approx(per_service.total_cost - per_service.total_products_cost)

    def test_empty_quote(self):
        totals = calculate_quote_totals([])
        assert totals.total_service_value == 0
        assert totals.margin_pct == 0
        assert totals.suggested_price == 0

    def test_full_discount_has_no_fee_and_no_margin(self):
        credit = PaymentMethodForCalculation(type=PaymentMethodType.CREDIT_CARD, installments={1: 4.0})
        totals = calculate_quote_totals(
            [self.service(price=100, products=[])],
            discount_value=100,
            discount_type=AdjustmentType.PERCENTAGE,
            payment_method=credit,
        )
        assert totals.value_after_discount == 0
        assert totals.payment_fee == 0
        assert totals.margin_pct == 0

    def test_invalid_margin_raises(self):
        with pytest.raises(ValueError):
            calculate_quote_totals([self.service()], desired_margin_pct=100)


class TestDilutionMix:
    def test_mix(self):
        mix = calculate_dilution_mix(1, 9, 500)
        assert mix.product_ml == pytest.approx(50)
        assert mix.water_ml == pytest.approx(450)

    def test_degenerate_mix(self):
        mix = calculate_dilution_mix(0, 0, 500)
        assert mix.product_ml == 0 and mix.water_ml == 0
