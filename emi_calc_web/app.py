import logging
import os

from flask import Flask, jsonify, request
from werkzeug.exceptions import InternalServerError

from emi_calc.engine import amortize
from emi_calc.errors import InvalidLoanInput
from emi_calc.gold import TENURE_CHOICES
from emi_calc.logging_config import configure_logging
from emi_calc.products import PRODUCTS, get_product
from emi_calc.utils import round_currency, round_percent
from emi_calc_web.payloads import parse_calculation, preview_length

configure_logging()
logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_PREVIEW = 120


def schedule_preview_from_env() -> int:
    """Read ``EMI_CALC_SCHEDULE_PREVIEW``, falling back to the default on bad values."""
    raw = os.environ.get("EMI_CALC_SCHEDULE_PREVIEW")
    if raw is None:
        return DEFAULT_SCHEDULE_PREVIEW
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value < 0:
        logger.warning(
            "Ignoring EMI_CALC_SCHEDULE_PREVIEW=%r; using %d rows",
            raw,
            DEFAULT_SCHEDULE_PREVIEW,
        )
        return DEFAULT_SCHEDULE_PREVIEW
    return value


app = Flask(__name__)
app.config["SCHEDULE_PREVIEW"] = schedule_preview_from_env()
app.json.sort_keys = False


def _money(value) -> float:
    return float(round_currency(value))


def _serialize_schedule(product, schedule):
    """Convert schedule entries into JSON-serialisable rows for the widget tables."""
    serialized = []
    for entry in schedule:
        serialized.append(
            {
                "period": entry.period_index,
                product.period_field: entry.period_index,
                "principal": _money(entry.principal_portion),
                "interest": _money(entry.interest_portion),
                product.payment_field: _money(entry.installment),
                "balance": _money(entry.closing_balance),
            }
        )
    return serialized


def _build_response(product, calc, result) -> dict:
    req = calc.request
    installment = _money(result.periodic_installment)
    payload = {
        "status": "success",
        "product": product.key,
        "emi": installment,
        product.installment_field: installment,
        "principal": _money(result.total_principal),
        "principalAmount": _money(result.total_principal),
        "totalInterest": _money(result.total_interest),
        "totalPayment": _money(result.total_payment),
        "principalPercentage": float(round_percent(result.principal_percentage)),
        "interestPercentage": float(round_percent(result.interest_percentage)),
        "interestRate": float(req.annual_rate_percent),
        "tenurePeriods": req.tenure_periods,
        "periodsPerYear": req.periods_per_year,
        "emiScheme": req.payment_scheme.value,
    }
    for key, value in calc.extras.items():
        payload[key] = _money(value)
    if calc.include_schedule:
        payload["amortizationSchedule"] = _serialize_schedule(product, result.schedule)
        payload["truncatedRows"] = result.truncated
    return payload


def _calculate(product_key: str):
    product = get_product(product_key)
    body = request.get_json(silent=True)
    if body is None:
        raise InvalidLoanInput("Request body must be valid JSON")
    calc = parse_calculation(product, body)
    preview = preview_length(product, calc, app.config["SCHEDULE_PREVIEW"]) if calc.include_schedule else 0
    result = amortize(calc.request, preview=preview)
    logger.info(
        "%s: principal=%s rate=%s periods=%d scheme=%s -> installment=%s",
        product.key,
        calc.request.principal,
        calc.request.annual_rate_percent,
        calc.request.tenure_periods,
        calc.request.payment_scheme.value,
        result.periodic_installment,
    )
    return jsonify(_build_response(product, calc, result))


@app.errorhandler(InvalidLoanInput)
def handle_invalid_input(exc: InvalidLoanInput):
    logger.warning("Rejected calculation request on %s: %s", request.path, exc)
    return jsonify({"status": "error", "error": str(exc)}), 400


@app.errorhandler(InternalServerError)
def handle_server_error(exc: InternalServerError):
    original = getattr(exc, "original_exception", None)
    logger.error("Unhandled error on %s", request.path, exc_info=original)
    return jsonify({"status": "error", "error": "An unexpected error occurred. Please try again later."}), 500


@app.post("/calculate-car-loan-emi")
def car_loan_emi():
    return _calculate("car-loan")


@app.post("/calculate-used-car-loan-emi")
def used_car_loan_emi():
    return _calculate("used-car-loan")


@app.post("/calculate-personal-loan-emi")
def personal_loan_emi():
    return _calculate("personal-loan")


@app.post("/calculate-quarterly-emi")
def quarterly_emi():
    return _calculate("quarterly")


@app.post("/calculate-weekly-emi")
def weekly_emi():
    return _calculate("weekly")


@app.post("/calculate-gold-loan-emi")
def gold_loan_emi():
    return _calculate("gold-loan")


@app.get("/products")
def list_products():
    products = [product.to_dict() for product in PRODUCTS.values()]
    for entry in products:
        if entry["key"] == "gold-loan":
            entry["tenureChoices"] = list(TENURE_CHOICES)
    return jsonify({"status": "success", "products": products})


@app.get("/health")
def health():
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    logger.info("Starting EMI calculator web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
