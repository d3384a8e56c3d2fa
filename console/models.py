"""
Pydantic models for API request/response serialization.

Field names are snake_case; JSON uses the listings API's camelCase keys.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from listing_engine.models import FacetSets, FilterCriteria, ListingRecord


class ListingOut(BaseModel):
    """Output model for listing data."""
    model_config = ConfigDict(populate_by_name=True)

    sku: str
    title_en: str = Field("", alias="titleEN")
    title_th: str = Field("", alias="titleTH")
    area_lp: str = Field("", alias="areaLP")
    area_lv: str = Field("", alias="areaLV")
    post_type: str = Field("", alias="postType")
    property_type: str = Field("", alias="propertyType")
    post_from: str = Field("", alias="postFrom")
    availability: str = ""
    bedroom: str = ""
    bathroom: str = ""
    price: Optional[float] = None
    area_size: Optional[float] = Field(None, alias="areaSize")
    floor: str = ""
    facing_direction: str = Field("", alias="facingDirection")
    unit_number: str = Field("", alias="unitNumber")
    building_year: Optional[int] = Field(None, alias="buildingYear")
    pet_allowed: str = Field("", alias="petAllowed")
    exclusive: str = ""
    update_availability: Optional[str] = Field(None, alias="updateAvailability")
    comment: str = ""
    listed_on: Optional[str] = Field(None, alias="listedOn")
    ps_code: Optional[int] = Field(None, alias="psCode")
    external_data_source: str = Field("", alias="externalDataSource")
    phone: Optional[str] = Field(None, alias="tel")
    name: str = ""
    email: str = ""
    line_id: str = Field("", alias="lineId")
    whatsapp: str = ""
    facebook_messenger: str = Field("", alias="facebookMessenger")
    wechat: str = ""

    @classmethod
    def from_record(cls, record: ListingRecord) -> "ListingOut":
        return cls.model_validate(record.to_dict())


class ListingsResponse(BaseModel):
    """Response model for a filtered listing page."""
    total: int
    items: List[ListingOut]


class ListingCreate(ListingOut):
    """Input model for a new listing; SKU and post type are required."""
    post_type: str = Field(..., min_length=1, alias="postType")

    def to_record(self) -> ListingRecord:
        return ListingRecord.from_dict(self.model_dump(by_alias=True))


class ListingStatusUpdate(BaseModel):
    """Status form: availability and comment."""
    comment: str = ""
    availability: str = ""


class AvailabilityOut(BaseModel):
    """Availability reported by the PS source for a listing."""
    availability: str = ""
    comment: str = ""


class SearchForm(BaseModel):
    """Search form body; list fields default to empty, scalars to null."""
    model_config = ConfigDict(populate_by_name=True)

    project_name_list: List[str] = Field(default_factory=list, alias="projectNameList")
    sku_list: List[str] = Field(default_factory=list, alias="skuList")
    area_lp_list: List[str] = Field(default_factory=list, alias="areaLPList")
    post_type_list: List[str] = Field(default_factory=list, alias="postTypeList")
    property_type_list: List[str] = Field(default_factory=list, alias="propertyTypeList")
    availability_list: List[str] = Field(default_factory=list, alias="availabilityList")
    bed_room_list: List[str] = Field(default_factory=list, alias="bedRoomList")
    bathroom_list: List[str] = Field(default_factory=list, alias="bathroomList")
    post_from_type_list: List[str] = Field(default_factory=list, alias="postFromTypeList")
    area_lv_list: List[str] = Field(default_factory=list, alias="areaLVList")
    min_price: Optional[float] = Field(None, alias="minPrice")
    max_price: Optional[float] = Field(None, alias="maxPrice")
    min_area_size: Optional[float] = Field(None, alias="minAreaSize")
    max_area_size: Optional[float] = Field(None, alias="maxAreaSize")
    pet_allowed: bool = Field(False, alias="petAllowed")
    exclusive: bool = False
    update_availability: Optional[str] = Field(None, alias="updateAvailability")
    tel: Optional[str] = None

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria.from_dict(self.model_dump(by_alias=True))


class FacetsOut(BaseModel):
    """Option lists for the search form."""
    project_names: List[str]
    skus: List[str]
    area_lp: List[str]
    area_lv: List[str]
    property_types: List[str]
    post_types: List[str]
    post_from: List[str]
    bedrooms: List[str]
    bathrooms: List[str]
    availability: List[str]
    update_availability: List[str]

    @classmethod
    def from_facets(cls, facets: FacetSets) -> "FacetsOut":
        return cls(**facets.__dict__)


class ZonesOut(BaseModel):
    data: List[str]


class ImagesOut(BaseModel):
    files: List[Any]
