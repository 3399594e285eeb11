"""
Shared module for code used by the REST API and its tests.

STRUCTURE:
- shared.security: Authentication, authorization, token management
  - auth.py: JWT signing/verification, current_user_context, require_admin
  - password.py: Bcrypt hashing, reset tokens
  - token_revocation.py: token_version based revocation (persisted on app_user)
  - rate_limit.py: slowapi limiter

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy engine/sessions, safe_commit()
  - correlation.py: X-Request-ID propagation

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Tiers, tier limits, statuses, limits

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation, SSRF prevention
  - schemas.py: Shared Pydantic schemas
  - dates.py: UTC helpers

IMPORT EXAMPLES:
    from shared.security.auth import verify_jwt, current_user_context
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import SubscriptionLimits, SubscriptionTier
    from shared.utils.exceptions import NotFoundError, ForbiddenError
    from shared.utils.validators import validate_image_url
"""
