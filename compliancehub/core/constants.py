"""Core constants: store collection names and composite id prefixes.

Single source of truth for the collection names shared with the rest of the
platform, and for the deterministic id prefixes the backfill migration uses
as idempotency keys.
"""

# Store collections (camelCase, as written by the platform)
COLLECTION_TENANTS = "tenants"
COLLECTION_DEPARTMENTS = "departments"
COLLECTION_USERS = "users"
COLLECTION_SERVICE_ACCOUNTS = "serviceAccounts"
COLLECTION_JOB_TITLES = "jobTitles"
COLLECTION_ENTITLEMENTS = "entitlements"
COLLECTION_LEGACY_ASSIGNMENTS = "assignments"
COLLECTION_ENTITLEMENT_ASSIGNMENTS = "entitlementAssignments"
COLLECTION_ORG_UNIT_TYPES = "orgUnitTypes"
COLLECTION_ORG_UNITS = "orgUnits"
COLLECTION_USER_ORG_UNITS = "userOrgUnits"
COLLECTION_POSITIONS = "positions"
COLLECTION_USER_POSITIONS = "userPositions"
COLLECTION_CAPABILITIES = "capabilities"
COLLECTION_USER_CAPABILITIES = "userCapabilities"
COLLECTION_AUDIT_EVENTS = "auditEvents"

# Composite id prefixes (joined with "-")
ID_PREFIX_ORG_UNIT_TYPE = "out"
ID_PREFIX_TENANT_ROOT_UNIT = "ou-tenant"
ID_PREFIX_DEPARTMENT_UNIT = "ou-dept"
ID_PREFIX_JOB_POSITION = "pos-jt"
ID_PREFIX_JOB_ASSIGNMENT = "eas-jt"
ID_PREFIX_USER_ORG_UNIT = "uou"
ID_PREFIX_USER_POSITION = "up"
ID_PREFIX_LEGACY_ASSIGNMENT = "eas-legacy"
ID_PREFIX_ASSIGNMENT = "eas"
ID_PREFIX_AUDIT = "audit"
ID_PREFIX_MIGRATION_RUN = "migration-backfill"

# Org unit types ensured per tenant: key -> (name, sort order)
ORG_UNIT_TYPE_COMPANY = "company"
ORG_UNIT_TYPE_DEPARTMENT = "department"
DEFAULT_ORG_UNIT_TYPES: dict[str, tuple[str, int]] = {
    ORG_UNIT_TYPE_COMPANY: ("Firma", 0),
    ORG_UNIT_TYPE_DEPARTMENT: ("Abteilung", 10),
}

# Tenant id recorded on the audit entry of an unscoped migration run
ALL_TENANTS = "all"
