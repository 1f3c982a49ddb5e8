# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the admin API:
# - models/: Pydantic schemas for users, analytics and settings
# - repositories/: User storage (Supabase and in-memory)
# - services/: User management, analytics and settings services
#
# Routes in app/ stay thin and delegate here.
# =============================================================================
