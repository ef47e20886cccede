"""Room catalogue — room types and stay pricing."""

from dataclasses import dataclass, field
from datetime import date

EXTRA_GUEST_PRICE = 300


@dataclass(frozen=True)
class RoomType:
    """A sellable room type and the room numbers that belong to it."""

    name: str
    price_per_night: int  # THB
    rooms: tuple[str, ...]
    bed_info: str
    amenities: tuple[str, ...] = field(default=())


_STANDARD_AMENITIES = (
    "ทีวี",
    "ตู้เย็น",
    "ผ้าเช็ดตัว",
    "ไดร์เป่าผม",
    "กาต้มน้ำ",
    "เครื่องทำน้ำอุ่น",
    "เครื่องปรับอากาศ",
    "ผ้าห่ม",
    "WIFI",
)

ROOM_TYPES: list[RoomType] = [
    RoomType(
        name="Deluxe Double Room (A)",
        price_per_night=800,
        rooms=("1", "2", "3", "5", "6", "7", "8", "9"),
        bed_info="เตียง 5 ฟุต + โซฟาตัว L",
        amenities=_STANDARD_AMENITIES,
    ),
    RoomType(
        name="Deluxe Double Room (B)",
        price_per_night=750,
        rooms=("13",),
        bed_info="เตียง 5 ฟุต + โต๊ะชุด",
        amenities=_STANDARD_AMENITIES,
    ),
    RoomType(
        name="Deluxe Double Room (C)",
        price_per_night=850,
        rooms=("14",),
        bed_info="เตียง 6 ฟุต King Bed + โซฟาสั้น",
        amenities=_STANDARD_AMENITIES,
    ),
    RoomType(
        name="Deluxe Triple Room (A)",
        price_per_night=1200,
        rooms=("4",),
        bed_info="เตียง 5 ฟุต กับ 3.5 ฟุต + โซฟาสั้น + ชุดโต๊ะ",
        amenities=_STANDARD_AMENITIES,
    ),
    RoomType(
        name="Deluxe Triple Room (B)",
        price_per_night=1200,
        rooms=("10", "11", "12"),
        bed_info="เตียง 5 ฟุตกับ 3.5 ฟุต + โซฟาตัว L",
        amenities=_STANDARD_AMENITIES,
    ),
    RoomType(
        name="Deluxe Twin Room",
        price_per_night=950,
        rooms=("15",),
        bed_info="เตียง 3.5 ฟุตกับ 3.5 ฟุต + ชุดโต๊ะ",
        amenities=_STANDARD_AMENITIES,
    ),
]


def get_room_type(room_number: str) -> RoomType | None:
    """Return the room type that contains ``room_number``, if any."""
    for room_type in ROOM_TYPES:
        if room_number in room_type.rooms:
            return room_type
    return None


def calculate_nights(check_in: date, check_out: date) -> int:
    """Number of nights for a stay, never less than one."""
    return max(1, (check_out - check_in).days)


def calculate_total_amount(room_number: str, check_in: date, check_out: date, extra_guests: int = 0) -> int:
    """Price a stay from the catalogue. Unknown rooms price at 0."""
    room_type = get_room_type(room_number)
    if room_type is None:
        return 0
    nights = calculate_nights(check_in, check_out)
    return room_type.price_per_night * nights + extra_guests * EXTRA_GUEST_PRICE * nights
