from cabservice.schemas.common import CamelModel, SuccessResponse
from cabservice.schemas.catalog import (
    CityCreate, CityUpdate, CityResponse, CityListResponse,
    CabTypeCreate, CabTypeUpdate, CabTypeResponse, CabTypeListResponse,
)
from cabservice.schemas.pricing import (
    AvailabilityResponse, PricingOption, RouteSummary, ResultsResponse,
    RoutePricingUpsert, RoutePricingUpdate, RoutePricingResponse,
    PricingRuleUpsert, PricingRuleResponse, QuoteResponse,
)
from cabservice.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from cabservice.schemas.inquiry import InquiryCreate, InquiryResponse, InquiryStatusUpdate
from cabservice.schemas.user import UserCreate, UserResponse, UserLogin, Token, ProfileUpdate

__all__ = [
    "CamelModel", "SuccessResponse",
    "CityCreate", "CityUpdate", "CityResponse", "CityListResponse",
    "CabTypeCreate", "CabTypeUpdate", "CabTypeResponse", "CabTypeListResponse",
    "AvailabilityResponse", "PricingOption", "RouteSummary", "ResultsResponse",
    "RoutePricingUpsert", "RoutePricingUpdate", "RoutePricingResponse",
    "PricingRuleUpsert", "PricingRuleResponse", "QuoteResponse",
    "BookingCreate", "BookingResponse", "BookingStatusUpdate",
    "InquiryCreate", "InquiryResponse", "InquiryStatusUpdate",
    "UserCreate", "UserResponse", "UserLogin", "Token", "ProfileUpdate",
]
