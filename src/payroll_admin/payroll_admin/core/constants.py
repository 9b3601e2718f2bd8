"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_HOURS = 24
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_HOURLY_WAGE = 6500
DEFAULT_RECENT_ACTIVITY = 10
MINUTES_PER_DAY = 24 * 60

DEFAULT_ROLE_NAME = "USER"
ADMIN_ROLE_NAME = "ADMIN"

# Permission names checked by the code itself (the rest live in the store).
MANAGE_PAYROLL = "MANAGE_PAYROLL"
READ_USERS = "READ_USERS"

DEFAULT_PERMISSIONS = (
    ("CREATE_USERS", "Create users", "USERS", "CREATE"),
    ("READ_USERS", "List and view users", "USERS", "READ"),
    ("UPDATE_USERS", "Update users", "USERS", "UPDATE"),
    ("DELETE_USERS", "Delete users", "USERS", "DELETE"),
    ("MANAGE_USERS", "Full user management", "USERS", "MANAGE"),
    ("CREATE_ROLES", "Create roles", "ROLES", "CREATE"),
    ("READ_ROLES", "List and view roles", "ROLES", "READ"),
    ("UPDATE_ROLES", "Update roles", "ROLES", "UPDATE"),
    ("DELETE_ROLES", "Delete roles", "ROLES", "DELETE"),
    ("MANAGE_ROLES", "Full role management", "ROLES", "MANAGE"),
    ("CREATE_PERMISSIONS", "Create permissions", "PERMISSIONS", "CREATE"),
    ("READ_PERMISSIONS", "List and view permissions", "PERMISSIONS", "READ"),
    ("UPDATE_PERMISSIONS", "Update permissions", "PERMISSIONS", "UPDATE"),
    ("DELETE_PERMISSIONS", "Delete permissions", "PERMISSIONS", "DELETE"),
    ("MANAGE_PERMISSIONS", "Full permission management", "PERMISSIONS", "MANAGE"),
    ("CREATE_PAYROLL", "Create payroll records", "PAYROLL", "CREATE"),
    ("READ_PAYROLL", "View payroll records", "PAYROLL", "READ"),
    ("UPDATE_PAYROLL", "Update payroll records", "PAYROLL", "UPDATE"),
    ("DELETE_PAYROLL", "Delete payroll records", "PAYROLL", "DELETE"),
    ("MANAGE_PAYROLL", "Access every employee's payroll", "PAYROLL", "MANAGE"),
    ("READ_DASHBOARD", "View dashboard", "DASHBOARD", "READ"),
    ("READ_ACTIVITY", "View activity log", "ACTIVITY", "READ"),
    ("READ_AUDIT", "View recent audit entries", "ACTIVITY", "READ"),
    ("MANAGE_ALL", "Administrative operations", "SYSTEM", "MANAGE"),
)
