"""Personal day planner: tasks anchored to calendar days, with reminders."""

__version__ = "0.1.0"
