# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    DASHBOARD = "DASHBOARD"
    INVENTORY = "INVENTORY"
    SALES = "SALES"
    EXPENSES = "EXPENSES"
    USERS = "USERS"
    REPORTS = "REPORTS"
