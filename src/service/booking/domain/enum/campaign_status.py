from enum import StrEnum


class CampaignStatus(StrEnum):
    PLANNING = 'planning'
    BOOKING_OPEN = 'booking_open'
    BOOKING_CLOSED = 'booking_closed'
    PRINTED = 'printed'
    MAILED = 'mailed'
    COMPLETED = 'completed'

    @property
    def rank(self) -> int:
        return CAMPAIGN_WORKFLOW.index(self)

    @property
    def next_status(self) -> 'CampaignStatus | None':
        if self.rank + 1 < len(CAMPAIGN_WORKFLOW):
            return CAMPAIGN_WORKFLOW[self.rank + 1]
        return None


CAMPAIGN_WORKFLOW: tuple[CampaignStatus, ...] = tuple(CampaignStatus)

# Offering (routes/industries) and schedule are frozen after this point
LAST_EDITABLE_CAMPAIGN_STATUS = CampaignStatus.BOOKING_OPEN

# Customers can no longer cancel once the mailer went to print
CANCELLATION_LOCKED_STATUSES = frozenset(
    {CampaignStatus.PRINTED, CampaignStatus.MAILED, CampaignStatus.COMPLETED}
)
