"""Core package - Business rules: repositories, scheduling, visits and reminders."""
