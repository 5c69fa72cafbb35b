"""UTMAudit — Export Rows.

Flattens campaign groups into one row per creative for the
downloadable table. Only what is shown gets exported.
"""

from typing import List

from utmaudit.core.issue_registry import get_issue
from utmaudit.core.platform_registry import display_name
from utmaudit.models.creative_models import CampaignGroup
from utmaudit.models.report_models import ExportRow

NO_PARAMS = "N/A"


def export_rows(groups: List[CampaignGroup]) -> List[ExportRow]:
    """One row per creative, in display order."""
    rows: List[ExportRow] = []
    for group in groups:
        for ad in group.ads:
            c = ad.creative
            rows.append(
                ExportRow(
                    platform=display_name(c.platform),
                    campaign_name=c.campaign.name,
                    campaign_id=c.campaign.id,
                    medium_name=c.medium.name,
                    medium_id=c.medium.id,
                    ad_name=c.ad.name,
                    ad_id=c.ad.id,
                    link=c.link,
                    track_params=ad.effective.value or NO_PARAMS,
                    status="Valid" if ad.verdict.is_valid else "Invalid",
                    issues="; ".join(get_issue(code).title for code in c.messages),
                    spend=c.spend,
                    is_active=c.is_active,
                )
            )
    return rows
