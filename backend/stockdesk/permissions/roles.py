# Overview: Role to permission table. The single source of truth for what
# each role may do; checked by permission_service.require_permission.

from .definitions import PERMISSION_DEFINITIONS


ALL_PERMISSION_CODES = frozenset(perm[0] for perm in PERMISSION_DEFINITIONS)

DEFAULT_ROLE_PERMISSIONS = {
    "admin": ALL_PERMISSION_CODES,
    "manager": frozenset({
        "VIEW_DASHBOARD",
        "VIEW_PRODUCTS",
        "MANAGE_PRODUCTS",
        "VIEW_SALES",
        "CREATE_SALE",
        "REVERSE_SALE",
        "VIEW_EXPENSES",
        "MANAGE_EXPENSES",
        "VIEW_REPORTS",
    }),
    "salesgirl": frozenset({
        "VIEW_PRODUCTS",
        "VIEW_SALES",
        "CREATE_SALE",
    }),
}
