from .models import Establishment, EstablishmentHours, EstablishmentHoursOverride

__all__ = [
    'Establishment',
    'EstablishmentHours',
    'EstablishmentHoursOverride',
]
