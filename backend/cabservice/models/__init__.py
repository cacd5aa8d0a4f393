from cabservice.models.user import User
from cabservice.models.city import City
from cabservice.models.cab_type import CabType, CUSTOM_CAB_TYPE_NAME
from cabservice.models.route import CityRoute, RoutePricing
from cabservice.models.pricing_rule import PricingRule
from cabservice.models.booking import Booking
from cabservice.models.inquiry import Inquiry
from cabservice.models.setting import Setting, PAYMENT_SETTING_KEY
from cabservice.models.enums import TripType, UserRole, BookingStatus, InquiryStatus

__all__ = [
    "User", "City", "CabType", "CUSTOM_CAB_TYPE_NAME",
    "CityRoute", "RoutePricing", "PricingRule",
    "Booking", "Inquiry", "Setting", "PAYMENT_SETTING_KEY",
    "TripType", "UserRole", "BookingStatus", "InquiryStatus",
]
