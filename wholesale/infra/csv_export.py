"""
CSV rendering of the monthly sales report.
"""
from __future__ import annotations

import calendar
import csv
import io
from decimal import Decimal

from wholesale.domain.money import round_money
from wholesale.domain.report import MonthlyReport


def _money(amount: Decimal) -> str:
    return f"${round_money(amount):.2f}"


def _quantity(amount: Decimal) -> str:
    return f"{round_money(amount):.2f}"


def report_title(report: MonthlyReport) -> str:
    start, end = report.window.start, report.window.end
    if report.window.is_calendar_month:
        return f"{calendar.month_name[start.month]} {start.year}"
    return f"{start.isoformat()} to {end.isoformat()}"


def report_filename(report: MonthlyReport) -> str:
    """sales-report-october-2026.csv for a calendar month window."""
    start = report.window.start
    if report.window.is_calendar_month:
        return f"sales-report-{calendar.month_name[start.month].lower()}-{start.year}.csv"
    return f"sales-report-{start.isoformat()}-{report.window.end.isoformat()}.csv"


def render_report_csv(report: MonthlyReport) -> str:
    """Summary block, per-product table and per-day table in one CSV document."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    rate_percent = f"{(report.commission_rate * 100).normalize():f}"

    writer.writerow([f"Monthly Sales Report - {report_title(report)}"])
    writer.writerow([])
    writer.writerow([f"Total Sales: {_money(report.total_sales)}"])
    writer.writerow([f"Total Orders: {report.total_orders}"])
    writer.writerow([f"Average Order Value: {_money(report.avg_order_value)}"])
    writer.writerow([f"Total Commission ({rate_percent}%): {_money(report.commission)}"])
    writer.writerow([])

    writer.writerow(["Product Sales:"])
    writer.writerow(["Product", "Quantity", "Sales"])
    for row in report.products:
        writer.writerow([row.name, _quantity(row.quantity), _money(row.sales)])
    writer.writerow([])

    writer.writerow(["Daily Sales:"])
    writer.writerow(["Date", "Sales"])
    for day in report.daily:
        writer.writerow([day.label, _money(day.sales)])

    return buffer.getvalue()
