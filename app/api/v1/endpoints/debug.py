from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import get_keycrm
from app.schemas.debug import KeyCrmProbeOut, PageProbe, PagesProbeOut
from app.services import keycrm_api
from app.services.keycrm_client import KeyCrmClient
from app.services.records import to_records

router = APIRouter(prefix="/debug")

PROBE_PAGES = 5


def _meta(payload: Any) -> Any:
    return payload.get("meta") if isinstance(payload, dict) else None


@router.get("/keycrm", response_model=KeyCrmProbeOut)
async def probe_keycrm(client: KeyCrmClient = Depends(get_keycrm)) -> KeyCrmProbeOut:
    """
    Fetch the first two buyer pages directly and report what KeyCRM says about them.
    Handy for checking whether per_page is honoured and what meta looks like.
    """
    page1 = await keycrm_api.list_buyers(client, keycrm_api.page_params(1, 100))
    page2 = await keycrm_api.list_buyers(client, keycrm_api.page_params(2, 100))
    records1 = to_records(page1)

    return KeyCrmProbeOut(
        page1_count=len(records1),
        page1_meta=_meta(page1),
        page2_count=len(to_records(page2)),
        page2_meta=_meta(page2),
        page1_sample=records1[:2],
    )


@router.get("/pages", response_model=PagesProbeOut)
async def probe_pages(client: KeyCrmClient = Depends(get_keycrm)) -> PagesProbeOut:
    results: list[PageProbe] = []
    for page in range(1, PROBE_PAGES + 1):
        records = await keycrm_api.fetch_buyer_page(client, page, 15)
        results.append(PageProbe(page=page, count=len(records), has_data=bool(records)))
        if not records:
            break

    return PagesProbeOut(pages_tested=results, total_unique_buyers=sum(r.count for r in results))
