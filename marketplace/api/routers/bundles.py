from fastapi import APIRouter, Depends

from marketplace.api.deps import get_marketplace
from marketplace.schemas.subscription import Bundle
from marketplace.services.marketplace import Marketplace

router = APIRouter(prefix="/bundles", tags=["bundles"])


@router.get("", response_model=list[Bundle])
def list_bundles(market: Marketplace = Depends(get_marketplace)):
    """
    List the bundles available for subscription.
    """
    return [
        Bundle(namespace=bundle_id.namespace, name=bundle_id.name)
        for bundle_id in sorted(market.list_bundles(), key=str)
    ]
