"""Small shared utilities (ids, time)."""

from sppg_rbac.shared.utils.datetime import ensure_utc, utc_now
from sppg_rbac.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "utc_now"]
