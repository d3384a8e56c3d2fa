"""
Data models for the listing console engine.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .utils import parse_number


# "3" in a bedroom/bathroom filter means "3 or more"
BEDROOM_BUCKET_MIN = 3
BUCKET_MARKER = str(BEDROOM_BUCKET_MIN)

AREA_LV_SEPARATOR = ", "


class PetAllowed(str, Enum):
    ALLOW = "Allow"


class ExclusiveFlag(str, Enum):
    EXCLUSIVE = "Exclusive"


class UpdateAvailabilityWindow(str, Enum):
    """How recently a listing's availability must have been updated."""
    LESS_THAN_7_DAYS = "Less than 7 days"
    LESS_THAN_30_DAYS = "Less than 30 days"

    @property
    def max_days(self) -> int:
        return 7 if self is UpdateAvailabilityWindow.LESS_THAN_7_DAYS else 30


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return _to_str(value)


def _to_optional_int(value: Any) -> Optional[int]:
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


@dataclass
class ListingRecord:
    """One real-estate unit listing as served by the remote listings API."""

    # Identity and categorical fields
    sku: str
    title_en: str = ""
    title_th: str = ""
    area_lp: str = ""
    area_lv: str = ""
    post_type: str = ""
    property_type: str = ""
    post_from: str = ""
    availability: str = ""

    # Unit details
    bedroom: str = ""
    bathroom: str = ""
    price: Optional[float] = None
    area_size: Optional[float] = None
    floor: str = ""
    facing_direction: str = ""
    unit_number: str = ""
    building_year: Optional[int] = None

    # Flags stored as literal strings
    pet_allowed: str = ""
    exclusive: str = ""

    # Status
    update_availability: Optional[str] = None
    comment: str = ""
    listed_on: Optional[str] = None
    ps_code: Optional[int] = None
    external_data_source: str = ""

    # Contact
    phone: Optional[str] = None
    name: str = ""
    email: str = ""
    line_id: str = ""
    whatsapp: str = ""
    facebook_messenger: str = ""
    wechat: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ListingRecord":
        """Build a record from a remote API payload, ignoring unknown keys."""
        kwargs: Dict[str, Any] = {}
        for attr, key in WIRE_KEYS.items():
            if key not in data:
                continue
            value = data[key]
            if attr in ("price", "area_size"):
                kwargs[attr] = parse_number(value)
            elif attr in ("building_year", "ps_code"):
                kwargs[attr] = _to_optional_int(value)
            elif attr in ("update_availability", "phone", "listed_on"):
                kwargs[attr] = _to_optional_str(value)
            else:
                kwargs[attr] = _to_str(value)
        kwargs.setdefault("sku", "")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the remote API's camelCase representation."""
        return {key: getattr(self, attr) for attr, key in WIRE_KEYS.items()}

    def area_lv_tags(self) -> List[str]:
        if not self.area_lv:
            return []
        return self.area_lv.split(AREA_LV_SEPARATOR)


WIRE_KEYS: Dict[str, str] = {
    "sku": "sku",
    "title_en": "titleEN",
    "title_th": "titleTH",
    "area_lp": "areaLP",
    "area_lv": "areaLV",
    "post_type": "postType",
    "property_type": "propertyType",
    "post_from": "postFrom",
    "availability": "availability",
    "bedroom": "bedroom",
    "bathroom": "bathroom",
    "price": "price",
    "area_size": "areaSize",
    "floor": "floor",
    "facing_direction": "facingDirection",
    "unit_number": "unitNumber",
    "building_year": "buildingYear",
    "pet_allowed": "petAllowed",
    "exclusive": "exclusive",
    "update_availability": "updateAvailability",
    "comment": "comment",
    "listed_on": "listedOn",
    "ps_code": "psCode",
    "external_data_source": "externalDataSource",
    "phone": "tel",
    "name": "name",
    "email": "email",
    "line_id": "lineId",
    "whatsapp": "whatsapp",
    "facebook_messenger": "facebookMessenger",
    "wechat": "wechat",
}


def _str_tuple(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    return tuple(_to_str(v) for v in values if v is not None)


@dataclass(frozen=True)
class FilterCriteria:
    """
    Search form values.

    Multi-select fields are inactive when empty, scalars when None and the two
    flags when False.
    """
    project_names: Tuple[str, ...] = ()
    skus: Tuple[str, ...] = ()
    area_lp: Tuple[str, ...] = ()
    post_types: Tuple[str, ...] = ()
    property_types: Tuple[str, ...] = ()
    availability: Tuple[str, ...] = ()
    bedrooms: Tuple[str, ...] = ()
    bathrooms: Tuple[str, ...] = ()
    post_from: Tuple[str, ...] = ()
    area_lv: Tuple[str, ...] = ()
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_area_size: Optional[float] = None
    max_area_size: Optional[float] = None
    pet_allowed: bool = False
    exclusive: bool = False
    update_availability: Optional[str] = None
    tel: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            if f.name in LIST_FIELDS:
                object.__setattr__(self, f.name, _str_tuple(getattr(self, f.name)))
        if self.tel is not None and not self.tel.strip():
            object.__setattr__(self, "tel", None)
        if self.update_availability == "":
            object.__setattr__(self, "update_availability", None)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FilterCriteria":
        """Build criteria from search form keys (``skuList``, ``minPrice``, ...)."""
        if not data:
            return cls()
        kwargs: Dict[str, Any] = {}
        for attr, key in FORM_KEYS.items():
            value = data.get(key)
            if value is None:
                continue
            if attr in LIST_FIELDS:
                kwargs[attr] = value
            elif attr in NUMBER_FIELDS:
                kwargs[attr] = parse_number(value)
            elif attr in ("pet_allowed", "exclusive"):
                kwargs[attr] = bool(value)
            else:
                kwargs[attr] = _to_str(value)
        return cls(**kwargs)

    def is_empty(self) -> bool:
        return self == FilterCriteria()


LIST_FIELDS = (
    "project_names", "skus", "area_lp", "post_types", "property_types",
    "availability", "bedrooms", "bathrooms", "post_from", "area_lv",
)
NUMBER_FIELDS = ("min_price", "max_price", "min_area_size", "max_area_size")

FORM_KEYS: Dict[str, str] = {
    "project_names": "projectNameList",
    "skus": "skuList",
    "area_lp": "areaLPList",
    "post_types": "postTypeList",
    "property_types": "propertyTypeList",
    "availability": "availabilityList",
    "bedrooms": "bedRoomList",
    "bathrooms": "bathroomList",
    "post_from": "postFromTypeList",
    "area_lv": "areaLVList",
    "min_price": "minPrice",
    "max_price": "maxPrice",
    "min_area_size": "minAreaSize",
    "max_area_size": "maxAreaSize",
    "pet_allowed": "petAllowed",
    "exclusive": "exclusive",
    "update_availability": "updateAvailability",
    "tel": "tel",
}


@dataclass
class FacetSets:
    """Distinct values used to populate the search form's options."""
    project_names: List[str] = field(default_factory=list)
    skus: List[str] = field(default_factory=list)
    area_lp: List[str] = field(default_factory=list)
    area_lv: List[str] = field(default_factory=list)
    property_types: List[str] = field(default_factory=list)
    post_types: List[str] = field(default_factory=list)
    post_from: List[str] = field(default_factory=list)
    bedrooms: List[str] = field(default_factory=list)
    bathrooms: List[str] = field(default_factory=list)
    availability: List[str] = field(default_factory=list)
    update_availability: List[str] = field(
        default_factory=lambda: [w.value for w in UpdateAvailabilityWindow]
    )
