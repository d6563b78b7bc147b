# saas_architect/processors/mock_generator.py
"""
Deterministic fallback blueprint, used when no provider produced a valid one.

generate_mock_blueprint(request) depends only on the request, so the same
request always yields the same blueprint.
"""

from typing import Any, Dict, List

from saas_architect.schemas import GenerateRequest, MonetizationType, TenantType

BASE_MVP_FEATURES = [
    "User authentication and authorization",
    "Core feature based on your idea",
    "Dashboard for users",
    "Basic CRUD operations",
    "Responsive UI design",
]

MONETIZATION_FEATURES = {
    MonetizationType.SUBSCRIPTION: [
        "Recurring billing with plan management",
        "Payment provider webhook handling (renewals, failed payments, cancellations)",
    ],
    MonetizationType.ONE_TIME: [
        "One-time checkout and payment processing",
        "License key generation and delivery",
    ],
    MonetizationType.FREEMIUM: [
        "Free tier with usage limits and quota tracking",
        "Upgrade flow from free to paid plan",
    ],
    MonetizationType.MARKETPLACE: [
        "Vendor onboarding and verification",
        "Escrow payments with vendor payouts and commission",
    ],
    MonetizationType.INTERNAL_TOOL: [
        "Single sign-on (SSO) with the company identity provider",
        "Audit logging of user actions",
        "Admin console for access management",
    ],
}

FUTURE_FEATURES = [
    "Advanced analytics and reporting",
    "Third-party integrations",
    "Mobile application",
    "API for external developers",
    "Advanced customization options",
]

ADMIN_PERMISSIONS = ["create", "read", "update", "delete", "manage_users"]
DEFAULT_PERMISSIONS = ["read", "update"]

BILLING_DIRECTORIES = {
    MonetizationType.SUBSCRIPTION: "subscriptions/",
    MonetizationType.ONE_TIME: "orders/",
    MonetizationType.FREEMIUM: "usage/",
    MonetizationType.MARKETPLACE: "marketplace/",
    MonetizationType.INTERNAL_TOOL: "admin/",
}

FRONTEND_LAYOUT = [
    "src/",
    "├── app/",
    "│   ├── (auth)/",
    "│   ├── (dashboard)/",
    "│   ├── api/",
    "│   ├── layout.tsx",
    "│   └── page.tsx",
    "├── components/",
    "├── lib/",
    "└── styles/",
]


def _col(name: str, type_: str, description: str) -> Dict[str, str]:
    return {"name": name, "type": type_, "description": description}


def _table(name: str, columns: List[Dict[str, str]]) -> Dict[str, Any]:
    return {"table_name": name, "columns": columns}


def _owner_column(tenant_type: TenantType) -> Dict[str, str]:
    if tenant_type == TenantType.MULTI:
        return _col("tenant_id", "UUID", "Reference to tenant")
    return _col("user_id", "UUID", "Reference to user")


def _monetization_tables(monetization: MonetizationType, tenant_type: TenantType) -> List[Dict[str, Any]]:
    owner = _owner_column(tenant_type)
    if monetization == MonetizationType.SUBSCRIPTION:
        return [
            _table("subscriptions", [
                _col("id", "UUID PRIMARY KEY", "Unique subscription identifier"),
                owner,
                _col("plan_id", "UUID", "Reference to subscription plan"),
                _col("status", "VARCHAR(20)", "Subscription status"),
                _col("current_period_end", "TIMESTAMP", "End of the current billing period"),
                _col("created_at", "TIMESTAMP", "Subscription start date"),
            ]),
            _table("subscription_plans", [
                _col("id", "UUID PRIMARY KEY", "Unique plan identifier"),
                _col("name", "VARCHAR(100)", "Plan name"),
                _col("price_cents", "INTEGER", "Price per billing interval in cents"),
                _col("interval", "VARCHAR(20)", "Billing interval (month, year)"),
                _col("created_at", "TIMESTAMP", "Creation date"),
            ]),
        ]
    if monetization == MonetizationType.ONE_TIME:
        return [
            _table("orders", [
                _col("id", "UUID PRIMARY KEY", "Unique order identifier"),
                owner,
                _col("amount_cents", "INTEGER", "Amount paid in cents"),
                _col("status", "VARCHAR(20)", "Payment status"),
                _col("created_at", "TIMESTAMP", "Order date"),
            ]),
            _table("license_keys", [
                _col("id", "UUID PRIMARY KEY", "Unique license identifier"),
                _col("order_id", "UUID", "Reference to order"),
                _col("key", "VARCHAR(255) UNIQUE", "License key"),
                _col("activated_at", "TIMESTAMP", "Activation date"),
            ]),
        ]
    if monetization == MonetizationType.FREEMIUM:
        return [
            _table("usage_limits", [
                _col("id", "UUID PRIMARY KEY", "Unique usage record identifier"),
                owner,
                _col("plan", "VARCHAR(50)", "Plan tier (free, pro)"),
                _col("monthly_quota", "INTEGER", "Allowed usage per month"),
                _col("used_this_month", "INTEGER", "Usage consumed in the current month"),
                _col("reset_at", "TIMESTAMP", "Next quota reset"),
            ]),
        ]
    if monetization == MonetizationType.MARKETPLACE:
        return [
            _table("vendors", [
                _col("id", "UUID PRIMARY KEY", "Unique vendor identifier"),
                _col("user_id", "UUID", "Reference to the owning user"),
                _col("display_name", "VARCHAR(255)", "Public vendor name"),
                _col("verified", "BOOLEAN", "Whether onboarding is complete"),
                _col("payout_account", "VARCHAR(255)", "External payout account reference"),
                _col("created_at", "TIMESTAMP", "Onboarding date"),
            ]),
            _table("transactions", [
                _col("id", "UUID PRIMARY KEY", "Unique transaction identifier"),
                _col("buyer_id", "UUID", "Reference to buying user"),
                _col("vendor_id", "UUID", "Reference to vendor"),
                _col("amount_cents", "INTEGER", "Gross amount in cents"),
                _col("commission_cents", "INTEGER", "Platform commission in cents"),
                _col("escrow_status", "VARCHAR(20)", "held, released or refunded"),
                _col("created_at", "TIMESTAMP", "Transaction date"),
            ]),
        ]
    return []


def _database_schema(request: GenerateRequest) -> List[Dict[str, Any]]:
    tables = [
        _table("users", [
            _col("id", "UUID PRIMARY KEY", "Unique user identifier"),
            _col("email", "VARCHAR(255) UNIQUE", "User email address"),
            _col("password_hash", "VARCHAR(255)", "Hashed password"),
            _col("role", "VARCHAR(50)", "User role"),
            _col("created_at", "TIMESTAMP", "Account creation date"),
        ]),
    ]
    if request.tenant_type == TenantType.MULTI:
        tables[0]["columns"].insert(1, _col("tenant_id", "UUID", "Reference to tenant"))
        tables.append(_table("tenants", [
            _col("id", "UUID PRIMARY KEY", "Unique tenant identifier"),
            _col("name", "VARCHAR(255)", "Tenant name"),
            _col("subdomain", "VARCHAR(100) UNIQUE", "Tenant subdomain"),
            _col("created_at", "TIMESTAMP", "Creation date"),
        ]))
    tables.extend(_monetization_tables(request.monetization, request.tenant_type))
    return tables


def _role_entry(role: str) -> Dict[str, Any]:
    is_admin = "admin" in role.lower()
    return {
        "name": role,
        "description": f"{role} role with appropriate permissions",
        "permissions": list(ADMIN_PERMISSIONS if is_admin else DEFAULT_PERMISSIONS),
    }


def generate_mock_blueprint(request: GenerateRequest) -> Dict[str, Any]:
    tenancy = "multi-tenant" if request.tenant_type == TenantType.MULTI else "single-tenant"
    tech_stack = ", ".join(request.tech_stack) or "modern technologies"
    return {
        "project_summary": (
            f"A {request.monetization.value} {tenancy} SaaS application built with {tech_stack}. "
            f"{request.idea}"
        ),
        "mvp_features": BASE_MVP_FEATURES + MONETIZATION_FEATURES[request.monetization],
        "future_features": list(FUTURE_FEATURES),
        "roles": [_role_entry(role) for role in request.roles],
        "database_schema": _database_schema(request),
        "folder_structure": {
            "frontend": list(FRONTEND_LAYOUT),
            "backend": [
                "src/",
                "├── auth/",
                "├── users/",
                "├── tenants/",
                f"├── {BILLING_DIRECTORIES[request.monetization]}",
                "├── common/",
                "├── app.module.ts",
                "└── main.ts",
            ],
        },
    }
