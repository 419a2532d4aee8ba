# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- DASHBOARD --

DASHBOARD_PERMISSIONS = [
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "View headline stock, revenue and expense figures",
        PermissionCategory.DASHBOARD,
    ),
]


# -- INVENTORY --

INVENTORY_PERMISSIONS = [
    (
        "VIEW_PRODUCTS",
        "View Products",
        "List products with quantities and prices",
        PermissionCategory.INVENTORY,
    ),
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Create, edit and delete products",
        PermissionCategory.INVENTORY,
    ),
]


# -- SALES --

SALES_PERMISSIONS = [
    (
        "VIEW_SALES",
        "View Sales",
        "List recorded sales",
        PermissionCategory.SALES,
    ),
    (
        "CREATE_SALE",
        "Create Sale",
        "Record a sale (decrements stock)",
        PermissionCategory.SALES,
    ),
    (
        "REVERSE_SALE",
        "Reverse Sale",
        "Delete a sale and restore its quantity to stock",
        PermissionCategory.SALES,
    ),
]


# -- EXPENSES --

EXPENSE_PERMISSIONS = [
    (
        "VIEW_EXPENSES",
        "View Expenses",
        "List recorded expenses",
        PermissionCategory.EXPENSES,
    ),
    (
        "MANAGE_EXPENSES",
        "Manage Expenses",
        "Record and delete expenses",
        PermissionCategory.EXPENSES,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "VIEW_USERS",
        "View Users",
        "List staff accounts",
        PermissionCategory.USERS,
    ),
    (
        "MANAGE_USERS",
        "Manage Users",
        "Create and delete staff accounts",
        PermissionCategory.USERS,
    ),
]


# -- REPORTS --

REPORT_PERMISSIONS = [
    (
        "VIEW_REPORTS",
        "View Reports",
        "Revenue, profit, stock status and expense breakdown reports",
        PermissionCategory.REPORTS,
    ),
]


PERMISSION_DEFINITIONS = (
    DASHBOARD_PERMISSIONS
    + INVENTORY_PERMISSIONS
    + SALES_PERMISSIONS
    + EXPENSE_PERMISSIONS
    + USER_PERMISSIONS
    + REPORT_PERMISSIONS
)
