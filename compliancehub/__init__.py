"""ComplianceHub entitlement engine: effective access, backfill migration, verification."""
