"""
Blockchain time keeping for Cardano-style chains.
Slots are numbered from genesis and grouped into fixed-length epochs.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from cardano_healthcheck.exceptions import InvariantViolation

ONE_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class TimeSettings:
    """Time parameters of a chain, as read from its genesis file."""

    genesis_time: datetime
    slots_per_epoch: int
    slot_duration: timedelta

    def __post_init__(self):
        if self.genesis_time.tzinfo is None:
            object.__setattr__(self, 'genesis_time', self.genesis_time.replace(tzinfo=timezone.utc))


@dataclass(frozen=True)
class SlotPosition:
    """Epoch index and slot index within that epoch."""

    epoch: int
    slot: int

    def absolute_slot(self, settings: TimeSettings) -> int:
        """Slot number counted from genesis."""
        return self.epoch * settings.slots_per_epoch + self.slot

    def __str__(self):
        return f"{self.epoch}.{self.slot}"


@dataclass(frozen=True)
class SlotDate:
    """The wall-clock interval [start, end) covered by one slot."""

    position: SlotPosition
    start: datetime
    end: datetime


def _check_settings(settings: TimeSettings):
    if settings.slots_per_epoch <= 0:
        raise InvariantViolation(f"slots per epoch must be positive, got {settings.slots_per_epoch}")
    if settings.slot_duration <= timedelta(0):
        raise InvariantViolation(f"slot duration must be positive, got {settings.slot_duration}")


def split_slot_number(slot_number: int, settings: TimeSettings) -> SlotPosition:
    """Decompose an absolute slot number into its epoch and in-epoch slot."""
    _check_settings(settings)
    if slot_number < 0:
        raise InvariantViolation(f"slot number must not be negative, got {slot_number}")
    epoch, slot = divmod(slot_number, settings.slots_per_epoch)
    return SlotPosition(epoch=epoch, slot=slot)


def full_slot_date_from(position: SlotPosition, settings: TimeSettings) -> SlotDate:
    """
    Compute the interval of the given slot.

    Offsets are computed in whole microseconds on Python ints, so only the final
    datetime is bounded. OverflowError is raised when the slot lies outside the
    range datetime can represent.
    """
    _check_settings(settings)
    if position.epoch < 0 or not 0 <= position.slot < settings.slots_per_epoch:
        raise InvariantViolation(
            f"slot {position} does not exist with {settings.slots_per_epoch} slots per epoch"
        )

    slot_us = settings.slot_duration // ONE_MICROSECOND
    start_us = position.epoch * settings.slots_per_epoch * slot_us + position.slot * slot_us
    start = settings.genesis_time + timedelta(microseconds=start_us)
    end = start + settings.slot_duration
    return SlotDate(position=position, start=start, end=end)


def slot_date_for(slot_number: int, settings: TimeSettings) -> SlotDate:
    """Locate an absolute slot number in time."""
    position = split_slot_number(slot_number, settings)
    if position.absolute_slot(settings) != slot_number:
        raise InvariantViolation(
            f"slot {position} recombines to {position.absolute_slot(settings)}, expected {slot_number}"
        )
    return full_slot_date_from(position, settings)
