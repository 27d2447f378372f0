"""Shared application constants.

Centralizes the milestone ladder and the defaults used by groups and
profiles so we can document and adjust them in one place.
"""

# Badge ladder in miles. The last rung is a placeholder for the goal itself.
BASE_MILESTONES = (10, 25, 50, 100, 150, 200, 250)
GOAL_SENTINEL = 250

# Used when a group or profile has no (or a zero) goal stored
DEFAULT_GOAL_MILES = 250.0

DEFAULT_DISPLAY_NAME = "Member"

# Join codes: 6 chars, upper-case letters and digits
JOIN_CODE_LENGTH = 6
JOIN_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# Upper bounds matching the Numeric column precision of each miles field
MAX_ENTRY_MILES = 99999.99  # entries.miles, Numeric(7, 2)
MAX_GOAL_MILES = 999999.99  # groups.goal_miles / profiles.personal_goal_miles, Numeric(8, 2)
MAX_HIKE_DISTANCE_MILES = 9999.99  # group_events.distance_miles, Numeric(6, 2)
