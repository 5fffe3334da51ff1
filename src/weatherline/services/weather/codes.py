"""Italian labels for WMO weather interpretation codes used by Open-Meteo."""

from __future__ import annotations

from typing import Optional

WEATHER_CODE_LABELS = {
    0: "Sereno",
    1: "Prevalentemente sereno",
    2: "Parzialmente nuvoloso",
    3: "Coperto",
    45: "Nebbia",
    48: "Nebbia con brina",
    51: "Pioviggine leggera",
    53: "Pioviggine",
    55: "Pioviggine intensa",
    56: "Pioggia gelata leggera",
    57: "Pioggia gelata",
    61: "Pioggia debole",
    63: "Pioggia",
    65: "Pioggia forte",
    66: "Rovescio gelato leggero",
    67: "Rovescio gelato",
    71: "Neve debole",
    73: "Neve",
    75: "Neve forte",
    77: "Granelli di neve",
    80: "Rovesci leggeri",
    81: "Rovesci",
    82: "Rovesci intensi",
    85: "Rovesci di neve leggeri",
    86: "Rovesci di neve intensi",
    95: "Temporale",
    96: "Temporale con grandine",
    99: "Temporale con grandine forte",
}


def describe_weather_code(code: Optional[int]) -> Optional[str]:
    if code is None:
        return None
    return WEATHER_CODE_LABELS.get(code, f"Codice meteo {code}")
