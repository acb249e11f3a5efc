"""
Labels backend — collection and field names.

Every persisted name lives here so the store layer, the engine and the tests
agree on the document layout.
"""

# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

LABELS_COLLECTION: str = "labels"
CUSTOMERS_COLLECTION: str = "customers"

ALERTS_COLLECTION: str = "cloudAnalyticsAlerts"
ATTRIBUTION_GROUPS_COLLECTION: str = "cloudAnalyticsAttributionGroups"
ATTRIBUTIONS_COLLECTION: str = "attributions"
BUDGETS_COLLECTION: str = "cloudAnalyticsBudgets"
METRICS_COLLECTION: str = "cloudAnalyticsMetrics"
REPORTS_COLLECTION: str = "savedReports"

# ---------------------------------------------------------------------------
# Document fields
# ---------------------------------------------------------------------------

ID_FIELD: str = "_id"

# Label documents
NAME_FIELD: str = "name"
COLOR_FIELD: str = "color"
CREATED_BY_FIELD: str = "createdBy"
CUSTOMER_FIELD: str = "customer"
CREATED_AT_FIELD: str = "createdAt"
MODIFIED_AT_FIELD: str = "modifiedAt"
OBJECTS_FIELD: str = "objects"

# Labeled object documents
LABELS_FIELD: str = "labels"
COLLABORATORS_FIELD: str = "collaborators"
PUBLIC_FIELD: str = "public"
OWNER_FIELD: str = "owner"
