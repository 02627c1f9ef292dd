"""Tests for CLI date filter helpers."""

from datetime import date

import click
import pytest

from posledger.cli.date_filters import parse_cli_date, pop_period_flags, resolve_cli_date_range
from posledger.utils.date_parser import PERIODS, get_date_range


@pytest.fixture
def ctx():
    return click.Context(click.Command("report"))


def _flags(*selected):
    return {period: period in selected for period in PERIODS}


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"period_flags": _flags("this-month", "last-month")}, "Only one period option"),
        ({"period_flags": _flags("this-year"), "start_date": "2024-01-01"}, "cannot be combined"),
        ({"period_flags": _flags("last-week"), "end_date": "2024-01-31"}, "cannot be combined"),
        ({"period_flags": _flags(), "start_date": "not-a-date"}, "Invalid start date"),
        ({"period_flags": _flags(), "end_date": "not-a-date"}, "Invalid end date"),
    ],
)
def test_resolve_cli_date_range_errors(ctx, capsys, kwargs, message):
    kwargs.setdefault("start_date", None)
    kwargs.setdefault("end_date", None)

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(ctx, **kwargs)

    assert excinfo.value.exit_code == 1
    assert message in capsys.readouterr().err


@pytest.mark.parametrize("period", PERIODS)
def test_resolve_cli_date_range_uses_period(ctx, period):
    resolved = resolve_cli_date_range(ctx, start_date=None, end_date=None, period_flags=_flags(period))
    assert resolved == get_date_range(period)


def test_resolve_cli_date_range_explicit_dates(ctx):
    resolved = resolve_cli_date_range(
        ctx, start_date="2024-01-02", end_date="January 5, 2024", period_flags=_flags()
    )
    assert resolved == (date(2024, 1, 2), date(2024, 1, 5))


def test_resolve_cli_date_range_open_ended(ctx):
    assert resolve_cli_date_range(ctx, start_date=None, end_date=None, period_flags={}) == (None, None)
    assert resolve_cli_date_range(ctx, start_date="2024-03-01", end_date=None, period_flags={}) == (
        date(2024, 3, 1),
        None,
    )


def test_resolve_cli_date_range_default_only_without_dates(ctx):
    default = (date(2020, 1, 1), date(2020, 1, 31))

    assert resolve_cli_date_range(
        ctx, start_date=None, end_date=None, period_flags={}, default_range=default
    ) == default
    assert resolve_cli_date_range(
        ctx, start_date=None, end_date="2024-02-01", period_flags={}, default_range=default
    ) == (None, date(2024, 2, 1))


def test_parse_cli_date(ctx, capsys):
    assert parse_cli_date(ctx, None, "as-of date") is None
    assert parse_cli_date(ctx, "2024-06-30", "as-of date") == date(2024, 6, 30)

    with pytest.raises(click.exceptions.Exit):
        parse_cli_date(ctx, "someday", "as-of date")
    assert "Invalid as-of date" in capsys.readouterr().err


def test_pop_period_flags_removes_flags_from_kwargs():
    kwargs = {period.replace("-", "_"): period == "this-month" for period in PERIODS}
    kwargs["as_json"] = True

    flags = pop_period_flags(kwargs)

    assert kwargs == {"as_json": True}
    assert [period for period, is_set in flags.items() if is_set] == ["this-month"]
