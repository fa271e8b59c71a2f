"""Cross-cutting helpers shared by services, auth and the API layer."""

from utils.timezone import now_utc, to_utc, parse_iso
from utils.company_context import (
    get_current_company_id,
    current_company_id_or_none,
    set_current_company_id,
    clear_current_company_id,
    company_context,
)
