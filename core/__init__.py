# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the todo domain logic:
# - models/: Pydantic schemas for todos, users and identities
# - services/: Todo, registration, credential and attachment services
#
# Services take the acting identity as an explicit argument and never
# look at the HTTP request. This keeps the logic testable.
# =============================================================================
