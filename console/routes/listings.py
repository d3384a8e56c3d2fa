"""
API route handlers for listings endpoints.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import StreamingResponse

from listing_engine.export import listings_to_csv
from listing_engine.models import FilterCriteria
from listing_engine.utils import parse_number

from ..client import ListingsApiError
from ..config import config
from ..models import (
    AvailabilityOut,
    FacetsOut,
    ImagesOut,
    ListingCreate,
    ListingOut,
    ListingsResponse,
    ListingStatusUpdate,
    SearchForm,
    ZonesOut,
)
from ..store import (
    DuplicateSkuError,
    InvalidSkuError,
    ListingNotFoundError,
    ListingStore,
    MissingPsCodeError,
    get_store,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["listings"])


def get_listing_filters(
    project_name: List[str] = Query([]),
    sku: List[str] = Query([]),
    area_lp: List[str] = Query([]),
    post_type: List[str] = Query([]),
    property_type: List[str] = Query([]),
    availability: List[str] = Query([]),
    bedroom: List[str] = Query([]),
    bathroom: List[str] = Query([]),
    post_from: List[str] = Query([]),
    area_lv: List[str] = Query([]),
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    min_area_size: Optional[str] = None,
    max_area_size: Optional[str] = None,
    pet_allowed: bool = False,
    exclusive: bool = False,
    update_availability: Optional[str] = None,
    tel: Optional[str] = None,
) -> FilterCriteria:
    """Dependency to extract listing filters from query parameters."""
    return FilterCriteria(
        project_names=project_name,
        skus=sku,
        area_lp=area_lp,
        post_types=post_type,
        property_types=property_type,
        availability=availability,
        bedrooms=bedroom,
        bathrooms=bathroom,
        post_from=post_from,
        area_lv=area_lv,
        # blank or non-numeric inputs leave the bound inactive
        min_price=parse_number(min_price),
        max_price=parse_number(max_price),
        min_area_size=parse_number(min_area_size),
        max_area_size=parse_number(max_area_size),
        pet_allowed=pet_allowed,
        exclusive=exclusive,
        update_availability=update_availability,
        tel=tel,
    )


def _upstream_error(e: ListingsApiError) -> HTTPException:
    logger.error(f"Listings API failure: {e}")
    return HTTPException(status_code=502, detail="Listings API unavailable")


@router.get("/listings", response_model=ListingsResponse)
async def get_api_listings(
    filters: FilterCriteria = Depends(get_listing_filters),
    limit: int = Query(config.MAX_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    store: ListingStore = Depends(get_store),
):
    """Get listings with filtering, SKU ordering and pagination."""
    try:
        rows = await store.search(filters)
        items = [ListingOut.from_record(r) for r in rows[offset:offset + limit]]
        return ListingsResponse(total=len(rows), items=items)

    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error fetching listings: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/listings/search", response_model=ListingsResponse)
async def search_listings(form: SearchForm, store: ListingStore = Depends(get_store)):
    """Search with a JSON search-form body; returns every match."""
    try:
        rows = await store.search(form.to_criteria())
        return ListingsResponse(total=len(rows), items=[ListingOut.from_record(r) for r in rows])

    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error searching listings: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/listings/facets", response_model=FacetsOut)
async def get_api_facets(store: ListingStore = Depends(get_store)):
    """Distinct values for the search form's option lists."""
    try:
        return FacetsOut.from_facets(await store.facets())

    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error deriving facets: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/listings/reload", status_code=204)
async def reload_listings(store: ListingStore = Depends(get_store)):
    """Drop the cached collection and fetch it again."""
    try:
        await store.get_all(force=True)
        return Response(status_code=204)

    except ListingsApiError as e:
        raise _upstream_error(e)


@router.get("/listings/{sku}", response_model=ListingOut)
async def get_api_listing(sku: str, store: ListingStore = Depends(get_store)):
    """Get a specific listing by SKU."""
    try:
        return ListingOut.from_record(await store.get(sku))

    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Listing not found")
    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error fetching listing {sku}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/listings/{sku}/images", response_model=ImagesOut)
async def get_api_listing_images(
    sku: str,
    limit: Optional[int] = Query(None, ge=1),
    store: ListingStore = Depends(get_store),
):
    """Image files stored for a listing."""
    try:
        return ImagesOut(files=await store.images(sku, limit))

    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Listing not found")
    except ListingsApiError as e:
        raise _upstream_error(e)


@router.post("/listings", response_model=ListingOut, status_code=201)
async def create_api_listing(body: ListingCreate, store: ListingStore = Depends(get_store)):
    """Create a new listing."""
    try:
        created = await store.create(body.to_record())
        return ListingOut.from_record(created)

    except InvalidSkuError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateSkuError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error creating listing {body.sku}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/listings/{post_type}/{sku}", response_model=ListingOut)
async def update_api_listing(
    post_type: str,
    sku: str,
    body: ListingStatusUpdate,
    store: ListingStore = Depends(get_store),
):
    """Update a listing's availability status and comment."""
    try:
        updated = await store.update_status(post_type, sku, body.comment, body.availability)
        return ListingOut.from_record(updated)

    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Listing not found")
    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error updating listing {sku}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/listings/{post_type}/{sku}", status_code=204)
async def delete_api_listing(post_type: str, sku: str, store: ListingStore = Depends(get_store)):
    """Delete a listing."""
    try:
        await store.delete(post_type, sku)
        return Response(status_code=204)

    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Listing not found")
    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error deleting listing {sku}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/listings/{post_type}/{sku}/availability", response_model=AvailabilityOut)
async def get_api_availability(post_type: str, sku: str, store: ListingStore = Depends(get_store)):
    """Fetch the current availability from the PS source without saving it."""
    try:
        return AvailabilityOut(**await store.fetch_availability(post_type, sku))

    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Listing not found")
    except MissingPsCodeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ListingsApiError as e:
        raise _upstream_error(e)


@router.get("/zones", response_model=ZonesOut)
async def get_api_zones(store: ListingStore = Depends(get_store)):
    """All area zones known to the listings API."""
    try:
        return ZonesOut(data=await store.zones())

    except ListingsApiError as e:
        raise _upstream_error(e)


@router.get("/export/csv")
async def export_listings_csv(
    filters: FilterCriteria = Depends(get_listing_filters),
    store: ListingStore = Depends(get_store),
):
    """Export filtered listings as CSV."""
    try:
        rows = await store.search(filters)
        csv_content = listings_to_csv(rows)

        return StreamingResponse(
            iter([csv_content]),
            media_type='text/csv',
            headers={'Content-Disposition': 'attachment; filename="listings.csv"'}
        )

    except ListingsApiError as e:
        raise _upstream_error(e)
    except Exception as e:
        logger.error(f"Error exporting CSV: {e}")
        raise HTTPException(status_code=500, detail="Error generating CSV export")
