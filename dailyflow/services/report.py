"""
Analytics report
Plain-text summary of a statistics snapshot
"""

from datetime import date
from typing import List

from dailyflow.core.statistics import StatisticsSnapshot

SEPARATOR = "=" * 30


def _achievements(stats: StatisticsSnapshot) -> List[str]:
    lines = []
    if stats.completion_rate >= 80:
        lines.append("✓ Maintained excellent consistency")
    if stats.streak.current >= 7:
        lines.append(f"✓ {stats.streak.current}-day current streak")
    if stats.total_hours >= 100:
        lines.append(f"✓ {stats.total_hours:g}+ study hours logged")
    if stats.goals.rate >= 70:
        lines.append("✓ High goal achievement rate")
    return lines or ["Nothing yet, keep going!"]


def _recommendations(stats: StatisticsSnapshot) -> List[str]:
    if stats.completion_rate < 60:
        consistency = "Set smaller daily targets to build consistency"
    else:
        consistency = "Maintain your excellent consistency"

    if stats.habits.active < 3:
        habits = "Add 1-2 new habits to strengthen your routine"
    else:
        habits = "Your habits are well-established"

    if stats.streak.current >= stats.streak.best and stats.streak.current > 0:
        streak = "You're on track to beat your best streak!"
    else:
        streak = f"Aim to beat your best streak of {stats.streak.best} days"

    if stats.total_hours < 50:
        hours = "Increase study time gradually by 15-30 minutes daily"
    else:
        hours = "Excellent study volume, focus on quality now"

    return [consistency, habits, streak, hours]


def generate_report(stats: StatisticsSnapshot, username: str, generated: date) -> str:
    """Render the analytics report for one user"""
    trend = stats.hours_trend
    if trend.direction == "up":
        consistency = f"Improving (+{trend.percentage:g}% hours)"
    elif trend.direction == "down":
        consistency = f"Needs attention ({trend.percentage:g}% hours)"
    else:
        consistency = "Stable"

    lines = [
        "📊 DAILYFLOW ANALYTICS REPORT",
        SEPARATOR,
        "",
        f"Generated: {generated.strftime('%A, %B')} {generated.day}, {generated.year}",
        f"User: {username}",
        "",
        "📈 PERFORMANCE SUMMARY",
        f"• Overall Progress: {stats.completion_rate}%",
        f"• Total Days Tracked: {stats.total_days}",
        f"• Completed Days: {stats.completed_days}",
        f"• Current Streak: {stats.streak.current} days",
        f"• Best Streak: {stats.streak.best} days",
        "",
        "⏰ STUDY ANALYTICS",
        f"• Total Study Hours: {stats.total_hours:g}",
        f"• Average Daily Hours: {stats.avg_daily_hours:g}",
        f"• Hours This Month: {stats.monthly_hours:g}",
        f"• Study Consistency: {consistency}",
        "",
        "🎯 GOALS & ACHIEVEMENTS",
        f"• Goals Set: {stats.goals.total}",
        f"• Goals Completed: {stats.goals.completed}",
        f"• Overdue Goals: {stats.goals.overdue}",
        f"• Goal Completion Rate: {stats.goals.rate}%",
        "",
        "🏗️ PROJECTS STATUS",
        f"• Active Projects: {stats.projects.total - stats.projects.completed}",
        f"• Projects Completed: {stats.projects.completed}",
        f"• Average Progress: {stats.projects.average_progress}%",
        f"• Project Success Rate: {stats.projects.rate}%",
        "",
        "🔄 HABIT CONSISTENCY",
        f"• Total Habits: {stats.habits.total}",
        f"• Active Habits: {stats.habits.active}",
        f"• Habit Completion Rate: {stats.habit_completion_rate}%",
        f"• Average Habit Streak: {stats.habits.avg_streak} days",
        "",
        "🏆 KEY ACHIEVEMENTS",
    ]
    lines.extend(_achievements(stats))
    lines.extend(["", "💡 RECOMMENDATIONS"])
    lines.extend(f"{number}. {text}" for number, text in enumerate(_recommendations(stats), 1))
    lines.extend(["", SEPARATOR, "🌟 Keep going! Small daily improvements lead to big results."])

    return "\n".join(lines) + "\n"
