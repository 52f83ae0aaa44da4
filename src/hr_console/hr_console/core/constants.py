"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

from .enums import Role

# Terminal value of ``LeaveRequest.current_approver_role``.
DONE = "DONE"

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_AUDIT_LIMIT = 100

# Roles allowed to browse and purge the full leave history.
HISTORY_ROLES = frozenset({Role.HR, Role.ADMIN})
AUDIT_ROLES = frozenset({Role.ADMIN})

LEAVE_TYPES = (
    "Sick Leave",
    "Personal Leave",
    "Vacation",
    "Maternity Leave",
    "Unpaid Leave",
)

_OFFICE_CHAIN = (Role.OM, Role.DM, Role.CEO)
_FIELD_CHAIN = (Role.SUP, Role.OM, Role.DM, Role.CEO)
_PLANT_CHAIN = (Role.FM, Role.SUP, Role.PM, Role.DM)

# code -> (name, ordered approver roles)
DEFAULT_DEPARTMENTS = {
    "ACC": ("Accounting", _OFFICE_CHAIN),
    "FIN": ("Finance", _OFFICE_CHAIN),
    "HR": ("Human Resources", _OFFICE_CHAIN),
    "SEC": ("Secretariat", _OFFICE_CHAIN),
    "PUR": ("Purchasing", _OFFICE_CHAIN),
    "OFF": ("Office", _FIELD_CHAIN),
    "SALES": ("Sales", _FIELD_CHAIN),
    "WH": ("Warehouse", _FIELD_CHAIN),
    "MNT": ("Maintenance", _PLANT_CHAIN),
    "PROD": ("Production", _PLANT_CHAIN),
    "BOIL": ("Boiler", _PLANT_CHAIN),
    "GEN": ("General Labour", _PLANT_CHAIN),
}

# user_id, username, full name, roles, department code, position
DEMO_USERS = (
    ("u1", "chayapol", "Chayapol (Superuser)", (Role.SUPERUSER, Role.CEO, Role.ADMIN), "HR", "CEO / Administrator"),
    ("u2", "emp01", "Somsak Khayan", (Role.EMPLOYEE,), "PROD", "Production Operator"),
    ("u3", "mgr01", "Mana Huana", (Role.EMPLOYEE, Role.DM), "PROD", "Production Manager"),
    ("u4", "hr01", "Hana Bukkhon", (Role.EMPLOYEE, Role.HR), "HR", "HR Officer"),
)
