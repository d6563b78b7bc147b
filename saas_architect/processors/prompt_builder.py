# saas_architect/processors/prompt_builder.py
from saas_architect.schemas import GenerateRequest, MonetizationType, TenantType

MONETIZATION_LABELS = {
    MonetizationType.SUBSCRIPTION: "Subscription",
    MonetizationType.ONE_TIME: "One-time",
    MonetizationType.FREEMIUM: "Freemium",
    MonetizationType.MARKETPLACE: "Marketplace",
    MonetizationType.INTERNAL_TOOL: "Internal Tool",
}

TENANT_LABELS = {
    TenantType.SINGLE: "Single Tenant",
    TenantType.MULTI: "Multi-Tenant",
}

NO_TECH_STACK = "Not specified"

BLUEPRINT_SCHEMA_TEXT = """{
  "project_summary": string,
  "mvp_features": string[],
  "future_features": string[],
  "roles": [{ "name": string, "description": string, "permissions": string[] }],
  "database_schema": [{ "table_name": string, "columns": [{ "name": string, "type": string, "description": string }] }],
  "folder_structure": { "frontend": string[], "backend": string[] }
}"""

SYSTEM_PROMPT = f"""You are an expert SaaS architect. Generate a structured architecture blueprint in valid JSON format.

The JSON must follow this exact schema:
{BLUEPRINT_SCHEMA_TEXT}

Return ONLY valid JSON, no markdown, no explanations."""

JSON_ONLY_INSTRUCTION = (
    "Return ONLY a single JSON object matching this exact schema, "
    "with no surrounding prose and no markdown code fences:\n"
    f"{BLUEPRINT_SCHEMA_TEXT}"
)


def build_prompt(request: GenerateRequest, json_only: bool = True) -> str:
    """Render the user prompt for one generation request."""
    tech_stack = ", ".join(request.tech_stack) or NO_TECH_STACK
    parts = [
        "Create a SaaS architecture blueprint for the following:",
        "",
        "**App Idea:**",
        request.idea,
        "",
        "**User Roles:**",
        ", ".join(request.roles),
        "",
        "**Monetization Type:**",
        MONETIZATION_LABELS[request.monetization],
        "",
        "**Tenant Type:**",
        TENANT_LABELS[request.tenant_type],
        "",
        "**Tech Stack:**",
        tech_stack,
        "",
        "Generate a comprehensive architecture including:",
        "1. Project summary",
        "2. MVP features (prioritized list)",
        "3. Future features (for later iterations)",
        "4. Role & permission matrix for each role",
        "5. Database schema with tables and columns",
        "6. Suggested folder structure for frontend and backend",
    ]
    if json_only:
        parts.extend(["", JSON_ONLY_INSTRUCTION])
    return "\n".join(parts)
