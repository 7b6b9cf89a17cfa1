"""Province membership of the postal districts.

The postal records still use the 75 pre-2015 districts, so Nawalparasi and
Rukum appear once each and are filed under the province holding their
district headquarters.
"""
from typing import Dict, List, Optional


# ---------------------------------------------------------------- data ---

PROVINCE_DISTRICTS: Dict[str, List[str]] = {
    "Koshi": [
        "Taplejung", "Panchthar", "Ilam", "Jhapa", "Morang", "Sunsari",
        "Dhankuta", "Terhathum", "Sankhuwasabha", "Bhojpur", "Solukhumbu",
        "Okhaldhunga", "Khotang", "Udayapur",
    ],
    "Madhesh": [
        "Saptari", "Siraha", "Dhanusa", "Mahottari", "Sarlahi", "Rautahat",
        "Bara", "Parsa",
    ],
    "Bagmati": [
        "Dolakha", "Sindhupalchok", "Rasuwa", "Dhading", "Nuwakot",
        "Kathmandu", "Bhaktapur", "Lalitpur", "Kavrepalanchok", "Ramechhap",
        "Sindhuli", "Makawanpur", "Chitwan",
    ],
    "Gandaki": [
        "Gorkha", "Lamjung", "Tanahu", "Syangja", "Kaski", "Manang",
        "Mustang", "Myagdi", "Parbat", "Baglung",
    ],
    "Lumbini": [
        "Nawalparasi", "Rupandehi", "Kapilvastu", "Arghakhanchi", "Palpa",
        "Gulmi", "Dang", "Pyuthan", "Rolpa", "Banke", "Bardiya",
    ],
    "Karnali": [
        "Rukum", "Salyan", "Surkhet", "Dailekh", "Jajarkot", "Dolpa", "Jumla",
        "Kalikot", "Mugu", "Humla",
    ],
    "Sudurpashchim": [
        "Bajura", "Bajhang", "Achham", "Doti", "Kailali", "Kanchanpur",
        "Dadeldhura", "Baitadi", "Darchula",
    ],
}

_DISTRICT_TO_PROVINCE: Dict[str, str] = {
    district.lower(): province
    for province, districts in PROVINCE_DISTRICTS.items()
    for district in districts
}


# ----------------------------------------------------------- helpers ---

def get_province(district_name: str) -> Optional[str]:
    """Province of a canonical district name (case-insensitive), or None."""
    if not district_name:
        return None
    return _DISTRICT_TO_PROVINCE.get(district_name.strip().lower())
