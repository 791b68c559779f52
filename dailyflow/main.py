#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyFlow - Command Line
Usage: dailyflow [--date YYYY-MM-DD] <command> <username> [options]
"""

import sys
import json
import argparse
import logging
from datetime import date
from typing import Any, List, Optional

from dailyflow import __version__
from dailyflow.config import FlowConfig, get_config
from dailyflow.core.exceptions import ConfigurationError, DailyFlowError, ValidationError
from dailyflow.core.insights import generate_insights
from dailyflow.core.statistics import calculate_statistics
from dailyflow.core.streaks import calendar_streak, habit_streak
from dailyflow.services.data_service import DataService, get_data_service
from dailyflow.services.habit_service import get_habit_service
from dailyflow.services.notifications import check_daily_reminder, check_missed_days
from dailyflow.services.planner_service import get_planner_service
from dailyflow.services.report import generate_report
from dailyflow.utils.datetime_utils import now_local, parse_iso_date, today_local
from dailyflow.utils.logger import configure_logging

logger = logging.getLogger(__name__)


def _date_arg(value: str) -> date:
    parsed = parse_iso_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}")
    return parsed


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dailyflow", description="DailyFlow streak and statistics engine")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--date", type=_date_arg, help="Reference date instead of today (YYYY-MM-DD)")
    parser.add_argument("--dev", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("stats", "Statistics snapshot as JSON"),
        ("streaks", "Calendar and habit streaks"),
        ("insights", "Insight cards"),
        ("report", "Plain-text analytics report"),
        ("check", "Run the missed-day and daily-reminder checks once"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("username")

    toggle = subparsers.add_parser("toggle", help="Toggle a habit completion for a day (default today)")
    toggle.add_argument("username")
    toggle.add_argument("habit_id")
    toggle.add_argument("--day", type=_date_arg, help="Past date to toggle")

    log = subparsers.add_parser("log", help="Save the day log for a date")
    log.add_argument("username")
    log.add_argument("--day", type=_date_arg, help="Date to log (default today)")
    log.add_argument("--planned", type=float, default=8, help="Planned hours")
    log.add_argument("--actual", type=float, default=0, help="Actual hours")
    log.add_argument("--status", default="planned", help="planned, inprogress, completed or missed")
    log.add_argument("--task", action="append", default=[], help="Task text (repeatable)")
    log.add_argument("--notes", default="")

    add = subparsers.add_parser("add", help="Add a habit, goal or project")
    add.add_argument("kind", choices=["habit", "goal", "project"])
    add.add_argument("username")
    add.add_argument("name")
    add.add_argument("--description", default="")
    add.add_argument("--category")
    add.add_argument("--due", type=_date_arg, help="Goal target date or project deadline")

    export = subparsers.add_parser("export", help="Export a user's data as JSON")
    export.add_argument("username")
    export.add_argument("--output", help="Target file (default EXPORT_DIR)")

    import_ = subparsers.add_parser("import", help="Replace a user's data with an exported JSON file")
    import_.add_argument("username")
    import_.add_argument("path")

    subparsers.add_parser("config", help="Show the effective configuration")

    serve = subparsers.add_parser("serve", help="Run the dashboard API")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Port")
    serve.add_argument("--no-reminders", action="store_true", help="Do not schedule daily reminders")

    return parser


# ===== COMMANDS =====

def cmd_stats(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    data = data_service.load(args.username)
    stats = calculate_statistics(data, today, config.stats.week_window_days)
    _print_json(stats.model_dump(mode="json"))
    return 0


def cmd_streaks(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    data = data_service.load(args.username)
    streak = calendar_streak(data.calendar, today)
    print(f"📅 Calendar: current {streak.current}, best {streak.best}")

    for habit in data.habits:
        result = habit_streak(habit, today)
        print(f"🔥 {habit.name} [{habit.id}]: current {result.current}, best {result.best}")
    return 0


def cmd_insights(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    data = data_service.load(args.username)
    stats = calculate_statistics(data, today, config.stats.week_window_days)
    insights = generate_insights(
        stats, min_count=config.stats.min_insights, max_count=config.stats.max_insights, today=today
    )
    _print_json([insight.model_dump(mode="json") for insight in insights])
    return 0


def cmd_report(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    data = data_service.load(args.username)
    stats = calculate_statistics(data, today, config.stats.week_window_days)
    print(generate_report(stats, args.username, today), end="")
    return 0


def cmd_check(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    with data_service.user_lock(args.username):
        data = data_service.load(args.username)
        issued = [check_missed_days(data, today)]
        if args.date is None:
            issued.append(check_daily_reminder(data, now_local(config.timezone)))

        issued = [n for n in issued if n is not None]
        if issued:
            data_service.save(data)

    for notification in issued:
        print(f"🔔 {notification.title}: {notification.message}")
    if not issued:
        print("✅ Nothing to report")
    return 0


def cmd_toggle(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    day = args.day or today

    with data_service.transaction(args.username) as data:
        result = get_habit_service().toggle_completion(data, args.habit_id, day, today)
        completed = data.get_habit(args.habit_id).is_completed_on(day)

    state = "completed" if completed else "not completed"
    print(f"✅ {args.habit_id} {state} on {day.isoformat()} (streak {result.current}, best {result.best})")
    return 0


def cmd_log(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    day = args.day or today

    with data_service.transaction(args.username) as data:
        record = get_planner_service().save_day(data, day, {
            "plannedHours": args.planned,
            "actualHours": args.actual,
            "status": args.status,
            "notes": args.notes,
            "tasks": [{"text": text} for text in args.task]
        })

    print(f"📅 {day.isoformat()} saved: {record.status.value}, {record.actual_hours:g}/{record.planned_hours:g}h")
    return 0


def cmd_add(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    fields = {"description": args.description}
    if args.category:
        fields["category"] = args.category

    with data_service.transaction(args.username) as data:
        if args.kind == "habit":
            item = get_habit_service().add_habit(data, {**fields, "name": args.name}, today)
        elif args.kind == "goal":
            item = get_planner_service().add_goal(data, {**fields, "title": args.name, "targetDate": args.due})
        else:
            item = get_planner_service().add_project(data, {**fields, "name": args.name, "deadline": args.due})

    print(f"✅ {args.kind.capitalize()} added with id {item.id}")
    return 0


def cmd_export(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    target = data_service.export_user(args.username, args.output)
    print(f"📤 Exported to {target}")
    return 0


def cmd_import(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    data = data_service.import_user(args.username, args.path)
    print(f"📥 Imported {len(data.calendar)} days, {len(data.habits)} habits, "
          f"{len(data.goals)} goals, {len(data.projects)} projects")
    return 0


def cmd_config(args, config: FlowConfig, data_service: DataService, today: date) -> int:
    _print_json(config.to_dict())
    return 0


def cmd_serve(args, config: FlowConfig) -> int:
    import uvicorn
    from dailyflow.dashboard.app import create_app

    host = args.host or config.server.host
    port = args.port or config.server.port
    start_reminders = config.reminders.enabled and not args.no_reminders

    app = create_app(config, start_reminders=start_reminders)
    logger.info("🚀 Serving on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None, server_header=False)
    return 0


COMMANDS = {
    "stats": cmd_stats,
    "streaks": cmd_streaks,
    "insights": cmd_insights,
    "report": cmd_report,
    "check": cmd_check,
    "toggle": cmd_toggle,
    "log": cmd_log,
    "add": cmd_add,
    "export": cmd_export,
    "import": cmd_import,
    "config": cmd_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    logging_config = config.get_logging_config()
    if args.dev:
        logging_config['loggers']['']['level'] = 'DEBUG'
        logging_config['handlers']['console']['level'] = 'DEBUG'
    configure_logging(logging_config)

    if args.command == "serve":
        return cmd_serve(args, config)

    today = args.date or today_local(config.timezone)

    try:
        data_service = get_data_service()
        return COMMANDS[args.command](args, config, data_service, today)
    except ValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except DailyFlowError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
