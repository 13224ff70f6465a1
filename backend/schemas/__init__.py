"""schemas — dataclasses shared by the planner, API and CLI."""
