"""
Client subsystem.

Components:
- api.py: async HTTP client for the REST endpoints (httpx)
- session_store.py: local JSON mirror of the session {user, issued_at}
- session.py: SessionManager (identity + validity window)
- tasks.py: TaskManager (task cache, optimistic updates)
- reminders.py: ReminderEngine (notifications from elapsed reminders)
"""
