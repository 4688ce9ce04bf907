from .config import load_prometheus_url, load_time_settings
from .slots import SlotDate, SlotPosition, TimeSettings, full_slot_date_from, slot_date_for, split_slot_number

__all__ = [
    'load_prometheus_url',
    'load_time_settings',
    'SlotDate',
    'SlotPosition',
    'TimeSettings',
    'full_slot_date_from',
    'slot_date_for',
    'split_slot_number',
]
