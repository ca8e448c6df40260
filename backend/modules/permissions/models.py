"""
Permission module data models.

Pages and actions are closed enums: anything that does not parse into
one of them has no permission.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.models import Role


class Page(str, Enum):
    """Protected pages, in navigation order."""

    DASHBOARD = "dashboard"
    POS = "pos"
    INVENTORY = "inventory"
    PRODUCTS = "products"
    CATEGORIES = "categories"
    SUPPLIERS = "suppliers"
    CUSTOMERS = "customers"
    TRANSACTIONS = "transactions"
    LAYBY = "layby"
    REPORTS = "reports"
    EXPENSES = "expenses"
    ANALYTICS = "analytics"
    SETTINGS = "settings"
    SHOWCASE = "showcase"


class Action(str, Enum):
    """Gated actions."""

    VIEW_DASHBOARD = "view_dashboard"
    PROCESS_TRANSACTION = "process_transaction"
    VIEW_PRODUCTS = "view_products"
    MANAGE_INVENTORY = "manage_inventory"
    VIEW_CUSTOMERS = "view_customers"
    MANAGE_CUSTOMERS = "manage_customers"
    CREATE_CUSTOMER = "create_customer"
    UPDATE_CUSTOMER_BASIC = "update_customer_basic"
    VIEW_LAYBY = "view_layby"
    PROCESS_LAYBY_PAYMENT = "process_layby_payment"
    MANAGE_LAYBY = "manage_layby"
    VIEW_INVENTORY_BASIC = "view_inventory_basic"
    VIEW_REPORTS_BASIC = "view_reports_basic"
    VIEW_REPORTS_ADVANCED = "view_reports_advanced"
    MANAGE_CATEGORIES = "manage_categories"
    MANAGE_SUPPLIERS = "manage_suppliers"
    MANAGE_EXPENSES = "manage_expenses"
    CREATE_EXPENSE = "create_expense"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_TEAM = "manage_team"
    # Store lifecycle
    CREATE_STORE = "create_store"
    DELETE_STORE = "delete_store"
    CHANGE_OWNERSHIP = "change_ownership"
    MANAGE_BILLING = "manage_billing"
    EXPORT_ALL_DATA = "export_all_data"


class ResolvedRole(BaseModel):
    """The acting principal's effective role at the current store."""

    role: Role
    is_owner: bool = Field(default=False, description="Principal owns the store")
    member_id: Optional[str] = Field(None, description="Store member ID (PIN sessions)")
    member_name: Optional[str] = Field(None, description="Display name")

    model_config = ConfigDict(frozen=True)


class PermissionSet(BaseModel):
    """
    Pages and actions available to one role.

    Derived from the static permission table; never persisted.
    """

    role: Optional[Role] = None
    pages: frozenset[Page] = Field(default_factory=frozenset)
    actions: frozenset[Action] = Field(default_factory=frozenset)
    table_version: int = Field(..., description="Permission table version it was built from")

    model_config = ConfigDict(frozen=True)

    def can_access_page(self, page: Page | str) -> bool:
        try:
            return Page(page) in self.pages
        except ValueError:
            return False

    def can(self, action: Action | str) -> bool:
        try:
            return Action(action) in self.actions
        except ValueError:
            return False

    def available_pages(self) -> list[Page]:
        """Accessible pages in navigation order."""
        return [page for page in Page if page in self.pages]
