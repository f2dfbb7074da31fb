"""Sample goal, strategy and weekly plan for trying the app without a coaching session."""

from datetime import datetime, timezone

from switchup.memory.models import DayPlan, Goal, Strategy, WeeklyPlan


def sample_goal() -> Goal:
    return Goal(
        text="Improve overall health and energy levels",
        why="To have more energy for my family and be more productive at work",
        created_at=datetime.now(timezone.utc),
    )


def sample_strategy() -> Strategy:
    return Strategy(
        daily_structure="Wake up at 6:30 AM, work from 9 AM to 5 PM with a 1-hour lunch break, wind down after 9 PM",
        food_preferences="Mediterranean diet with plenty of vegetables, lean proteins, and healthy fats. Limit processed foods and added sugars.",
        movement="30-minute morning walk, 3 strength training sessions per week, and stretching before bed",
        recovery="7-8 hours of sleep, 10-minute meditation in the morning, and digital detox after 8 PM",
    )


def sample_weekly_plan() -> WeeklyPlan:
    days = [
        (1, "Hydration and movement", "Start with a morning walk and track water intake"),
        (2, "Meal prep", "Prepare healthy meals for the week"),
        (3, "Strength training", "Focus on form and consistency"),
        (4, "Mindfulness", "Practice 10 minutes of meditation"),
        (5, "Social connection", "Plan a healthy meal with friends or family"),
        (6, "Active recovery", "Gentle yoga or stretching"),
        (7, "Reflection", "Review the week and plan for the next one"),
    ]
    return WeeklyPlan(
        start_date=datetime.now(timezone.utc),
        days=[DayPlan(day_number=n, focus=focus, notes=notes) for n, focus, notes in days],
    )
