# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the todo API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_todo_service.py: Todo orchestration (ownership, attachments)
# - test_auth.py: Registration, credential checks, session tokens
# - test_storage_service.py: Attachment store adapter
# - test_supabase_client.py: Repository queries
# - test_api.py: Route gate and HTTP endpoints
#
# Run tests with: pytest
# =============================================================================
