import csv
import json

import click
import pytest
from click.testing import CliRunner

from emi_calc.data_models import PaymentScheme
from emi_calc.main import build_request_from_options, cli, parse_scenario_opts


@pytest.fixture
def runner():
    return CliRunner()


class TestBuildRequest:
    def test_half_year_tenure(self):
        request = build_request_from_options("5l", 9.5, years=2.5)
        assert request.tenure_periods == 30
        assert request.periods_per_year == 12

    def test_years_plus_months(self):
        request = build_request_from_options("500k", 9.5, years=1, months=6)
        assert request.tenure_periods == 18

    def test_quarterly_from_years(self):
        request = build_request_from_options("20l", 9, frequency="quarterly", years=10)
        assert request.tenure_periods == 40
        assert request.periods_per_year == 4

    def test_quarterly_from_half_years(self):
        request = build_request_from_options("500000", 10.0, frequency="quarterly", years=2.5)
        assert request.tenure_periods == 10

    def test_quarterly_years_between_quarters(self):
        with pytest.raises(click.BadParameter):
            build_request_from_options("500000", 10.0, frequency="quarterly", years=2.1)

    def test_advance_scheme(self):
        request = build_request_from_options("10l", 10, years=1, scheme="advance")
        assert request.payment_scheme is PaymentScheme.ADVANCE

    def test_negative_principal(self):
        with pytest.raises(click.BadParameter):
            build_request_from_options("-5", 10, years=1)


class TestScenarioOptions:
    def test_parse(self):
        params = parse_scenario_opts("-p 10l -r 9.5 -y 4 --scheme advance")
        assert params == {
            "principal": "10l",
            "rate": 9.5,
            "years": 4.0,
            "frequency": "monthly",
            "scheme": "advance",
        }

    def test_unknown_token(self):
        with pytest.raises(click.BadParameter):
            parse_scenario_opts("-p 10l -r 9 --balloon 5")

    def test_missing_rate(self):
        with pytest.raises(click.BadParameter):
            parse_scenario_opts("-p 10l -y 4")


class TestCommands:
    def test_summary(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "10l", "-r", "10", "-y", "1"])
        assert result.exit_code == 0, result.output
        assert "87,915.89" in result.output
        assert "12 monthly installments" in result.output

    def test_weekly_summary(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "1l", "-r", "12", "-f", "weekly", "-w", "52"])
        assert result.exit_code == 0, result.output
        assert "52 weekly installments" in result.output

    def test_schedule_prints_every_row(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "97500", "-r", "12", "-m", "6"])
        assert result.exit_code == 0, result.output
        assert "16,823.47" in result.output
        rows = [line for line in result.output.splitlines() if line.startswith(("1\t", "6\t"))]
        assert len(rows) == 2

    def test_schedule_csv_export(self, runner, tmp_path):
        path = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["schedule", "-p", "10l", "-r", "10", "-y", "1", "--output", str(path)])
        assert result.exit_code == 0, result.output
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Period", "Installment", "Principal", "Interest", "Balance"]
        assert len(rows) == 13
        assert rows[-1][-1] == "0.00"

    def test_schedule_json_export(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["schedule", "-p", "10l", "-r", "10", "-y", "1", "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["installment"] == pytest.approx(87915.89)
        assert len(data["schedule"]) == 12

    def test_unsupported_export(self, runner, tmp_path):
        path = tmp_path / "schedule.xlsx"
        result = runner.invoke(cli, ["schedule", "-p", "10l", "-r", "10", "-y", "1", "--output", str(path)])
        assert result.exit_code == 2

    def test_summary_json_export(self, runner, tmp_path):
        path = tmp_path / "summary.json"
        result = runner.invoke(cli, ["summary", "-p", "5l", "-r", "0", "-f", "quarterly", "-q", "20", "--output", str(path)])
        assert result.exit_code == 0, result.output
        summary = json.loads(path.read_text(encoding="utf-8"))["summary"]
        assert summary["installment"] == 25000
        assert summary["total_interest"] == 0
        assert summary["tenure_years"] == 5

    def test_negative_principal_is_usage_error(self, runner):
        result = runner.invoke(cli, ["summary", "--principal=-5", "-r", "10", "-y", "1"])
        assert result.exit_code == 2
        assert "cannot be negative" in result.output

    def test_compare(self, runner):
        result = runner.invoke(
            cli,
            ["compare", "--scenario1", "-p 10l -r 10 -y 5", "--scenario2", "-p 10l -r 9.5 -y 4"],
        )
        assert result.exit_code == 0, result.output
        assert "Comparison" in result.output
        assert "total_interest" in result.output

    def test_products(self, runner):
        result = runner.invoke(cli, ["products"])
        assert result.exit_code == 0
        assert "gold-loan" in result.output
        assert "(arrears/advance)" in result.output
