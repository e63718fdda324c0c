# =============================================================================
# core/repositories/follow_up_repository.py - Follow-up Lookups
# =============================================================================
# Read-only access to the doctor/patient follow_ups table. A follow-up is
# "active" once the patient has accepted it.
# =============================================================================

import logging
from uuid import UUID

from supabase import Client

from lib.supabase_client import SupabaseClientError, normalize_uuid

logger = logging.getLogger(__name__)

TABLE = "follow_ups"
ACTIVE_STATUS = "accepted"


class FollowUpRepository:
    """Supabase-backed follow-up queries."""

    def __init__(self, client: Client):
        self.client = client

    def has_active_follow_up_by_patient_id(self, patient_id: UUID | str) -> bool:
        patient_id_str = normalize_uuid(patient_id)

        try:
            response = (
                self.client.table(TABLE)
                .select("id")
                .eq("patient_id", patient_id_str)
                .eq("status", ACTIVE_STATUS)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch follow-ups: {e}",
                code="FETCH_FOLLOW_UPS_FAILED",
                details={"patient_id": patient_id_str},
            )

        return bool(response.data)
