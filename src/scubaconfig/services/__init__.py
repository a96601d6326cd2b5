"""scubaconfig services layer.

Services validate configuration models and own the active configuration.
"""

from scubaconfig.services.store import ConfigStore
from scubaconfig.services.validation import check_policy_id, validate_model

__all__ = ["ConfigStore", "check_policy_id", "validate_model"]
