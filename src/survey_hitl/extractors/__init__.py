from .base import Extraction, Rule, SurveyDocument, first_match
from .postal import extract_postal_code
from .phone import extract_phone
from .email import extract_email
from .names import extract_name_and_reading
from .address import extract_address
from .demographics import (
    extract_age,
    extract_occupation,
    extract_household_size,
    extract_sleeping_capacity,
    extract_has_pets,
)
from .selections import (
    extract_budget,
    extract_purchase_timing,
    extract_desired_vehicle_types,
    extract_acquisition_channels,
    extract_show_visit,
)
from .contact import extract_preferred_contact_day, extract_preferred_contact_time

__all__ = [
    "Extraction",
    "Rule",
    "SurveyDocument",
    "first_match",
    "extract_postal_code",
    "extract_phone",
    "extract_email",
    "extract_name_and_reading",
    "extract_address",
    "extract_age",
    "extract_occupation",
    "extract_household_size",
    "extract_sleeping_capacity",
    "extract_has_pets",
    "extract_budget",
    "extract_purchase_timing",
    "extract_desired_vehicle_types",
    "extract_acquisition_channels",
    "extract_show_visit",
    "extract_preferred_contact_day",
    "extract_preferred_contact_time",
]
