#!/usr/bin/env python3
"""
Revenue pacing report from a revenue file.
Loads a CSV or Excel file of daily revenue, validates it and prints pacing,
missing days, weekly alerts and the executive summary.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from revenue_pacing.models.entities import TargetConfiguration
from revenue_pacing.models.enums import Location, TimeFrame
from revenue_pacing.services.container import get_container
from revenue_pacing.services.dashboard_service import DashboardService
from revenue_pacing.services.factory import initialize_services
from revenue_pacing.services.revenue_file_service import RevenueFileError, RevenueFileService
from revenue_pacing.utils.date_range_utils import DateParseError, DateRangeUtils
from revenue_pacing.utils.template_formatters import format_currency, format_percentage

logger = logging.getLogger(__name__)


def load_targets(path: Optional[str]) -> Optional[TargetConfiguration]:
    """Target settings JSON ({dailyTargets, monthlyAdjustments}); None when no path."""
    if not path:
        return None
    with open(path, "r", encoding="utf-8") as f:
        return TargetConfiguration.from_dict(json.load(f))


def display_metrics(service: DashboardService, records, args, today: date):
    report = service.period_metrics(
        service.filter_records(records, args.time_frame, args.location, today=today, targets=args.targets),
        args.location, args.time_frame, targets=args.targets, today=today,
    )
    info = report.period_info
    print(f"📊 Pacing ({args.time_frame}, {Location.parse(args.location).value})")
    print(f"{'='*50}")
    if info is not None and info.start_date:
        print(f"Period: {info.start_date} to {info.end_date} "
              f"({info.elapsed_days} of {info.working_days_in_period} working days elapsed)")

    for label, row in (("Austin", report.austin), ("Charlotte", report.charlotte), ("Total", report.total)):
        print(f"  {label:<10} revenue {format_currency(row.revenue):>12}  "
              f"on-pace {format_currency(row.on_pace_target):>12}  "
              f"attainment {format_percentage(row.attainment_percent):>8}  "
              f"needed/day {format_currency(row.daily_pace_needed):>10}")
    print()


def display_missing_data(service: DashboardService, records, args, today: date):
    report = service.missing_data(records, args.targets, today)
    if report.missing_days == 0:
        print("✅ No missing working days")
    else:
        print(f"⚠️  {report.missing_days} working day(s) missing since {report.last_data_date}:")
        for day in report.missing_dates:
            print(f"   • {day.isoformat()}")
    print()


def display_weekly_alerts(service: DashboardService, records, args, today: date):
    report = service.weekly_anomalies(records, args.targets, today)
    if not report.has_alerts:
        print("✅ No weekly performance alerts")
    for comparison in report.comparisons:
        print(f"🔻 {comparison.location.value}: {comparison.change_percent:.1f}% vs previous week "
              f"({comparison.severity.value})")
        for alert in comparison.daily_alerts:
            print(f"   • {alert.date.isoformat()}: -{alert.drop_percent:.1f}% "
                  f"({format_currency(alert.previous_revenue)} -> {format_currency(alert.current_revenue)})")
    print()


def display_validation(result):
    if result.is_valid() and not result.has_warnings():
        print("✅ Data validation passed")
    for error in result.errors:
        print(f"❌ {error.field}: {error.message}")
    for warning in result.warnings:
        print(f"⚠️  {warning.field}: {warning.message}")
    print()


def display_executive_summary(service: DashboardService, records, args, today: date):
    result = service.executive_insights(records, args.targets, today)
    if not result.ok:
        print(f"ℹ️  Executive summary unavailable: {result.message}")
        return
    summary = result.insights.summary
    projection = result.insights.month_end_projection
    print("📈 Executive Summary")
    print(f"{'='*50}")
    print(f"  Current performance: {format_percentage(summary.current_performance)}")
    print(f"  Month-end projection: {format_currency(projection.combined)} "
          f"({format_percentage(projection.attainment)}, {projection.confidence}% confidence)")
    print(f"  Risk level: {summary.risk_level.value}")
    print(f"  {summary.key_insight}")
    if summary.action_required:
        for action in result.insights.recommendations.immediate:
            print(f"   → {action}")


def main():
    parser = argparse.ArgumentParser(
        description="Revenue pacing report for Austin and Charlotte",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Month-to-date report
  revenue-report data/revenue.csv

  # Last 30 days for Austin with custom targets
  revenue-report data/revenue.xlsx --targets targets.json --time-frame last30 --location Austin

  # Write a blank import template
  revenue-report --template revenue_template.csv
        """
    )

    parser.add_argument("revenue_file", nargs="?", help="CSV or Excel file with Date, Austin Revenue, Charlotte Revenue")
    parser.add_argument("--targets", help="Target settings JSON file")
    parser.add_argument("--time-frame", default=TimeFrame.MTD.value,
                        choices=[tf.value for tf in TimeFrame if tf is not TimeFrame.CUSTOM],
                        help="Reporting window (default: MTD)")
    parser.add_argument("--location", default=Location.COMBINED.value,
                        choices=[loc.value for loc in Location],
                        help="Location view (default: Combined)")
    parser.add_argument("--as-of", help="Report date YYYY-MM-DD (default: today)")
    parser.add_argument("--export", help="Write the loaded records to this CSV/XLSX path")
    parser.add_argument("--template", help="Write a blank import template to this path and exit")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose logging")

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    try:
        today = DateRangeUtils.parse_date(args.as_of) if args.as_of else date.today()
    except DateParseError as e:
        print(f"❌ {e}")
        sys.exit(1)

    initialize_services()
    container = get_container()
    file_service: RevenueFileService = container.get("revenue_file_service")
    service: DashboardService = container.get("dashboard_service")

    if args.template:
        path = file_service.write_template(args.template, today)
        print(f"✅ Template written to {path}")
        return

    if not args.revenue_file:
        parser.error("revenue_file is required unless --template is given")

    try:
        args.targets = load_targets(args.targets)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        print(f"❌ Could not read target settings: {e}")
        sys.exit(1)

    try:
        imported = file_service.load(Path(args.revenue_file), args.targets or service.default_targets, today)
    except RevenueFileError as e:
        print(f"❌ {e}")
        sys.exit(1)

    records = imported.records
    print(f"🔄 Revenue Pacing Report")
    print(f"File: {args.revenue_file} ({len(records)} records, {imported.skipped_rows} skipped)")
    print(f"As of: {today.isoformat()}")
    print()

    display_validation(imported.validation)
    if not records:
        print("❌ No usable records in file")
        sys.exit(1)

    display_metrics(service, records, args, today)
    display_missing_data(service, records, args, today)
    display_weekly_alerts(service, records, args, today)
    display_executive_summary(service, records, args, today)

    if args.export:
        path = file_service.export(records, args.export)
        print(f"\n✅ Exported {len(records)} records to {path}")


if __name__ == "__main__":
    main()
