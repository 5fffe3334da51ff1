"""Reference table of Italian provinces and their two-letter codes.

Geocoders report provinces by name ("Città metropolitana di Milano",
"Provincia di Bergamo", "Südtirol - Alto Adige"); :func:`province_code`
strips the administrative prefixes and accents before the lookup. Swap
:data:`PROVINCE_CODES` to support another country.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Mapping, Optional

PROVINCE_CODES: Mapping[str, str] = {
    "agrigento": "AG",
    "alessandria": "AL",
    "ancona": "AN",
    "aosta": "AO",
    "valle d'aosta": "AO",
    "arezzo": "AR",
    "ascoli piceno": "AP",
    "asti": "AT",
    "avellino": "AV",
    "bari": "BA",
    "barletta-andria-trani": "BT",
    "belluno": "BL",
    "benevento": "BN",
    "bergamo": "BG",
    "biella": "BI",
    "bologna": "BO",
    "bolzano": "BZ",
    "alto adige": "BZ",
    "sudtirol": "BZ",
    "brescia": "BS",
    "brindisi": "BR",
    "cagliari": "CA",
    "caltanissetta": "CL",
    "campobasso": "CB",
    "caserta": "CE",
    "catania": "CT",
    "catanzaro": "CZ",
    "chieti": "CH",
    "como": "CO",
    "cosenza": "CS",
    "cremona": "CR",
    "crotone": "KR",
    "cuneo": "CN",
    "enna": "EN",
    "fermo": "FM",
    "ferrara": "FE",
    "firenze": "FI",
    "foggia": "FG",
    "forli-cesena": "FC",
    "frosinone": "FR",
    "genova": "GE",
    "gorizia": "GO",
    "grosseto": "GR",
    "imperia": "IM",
    "isernia": "IS",
    "l'aquila": "AQ",
    "la spezia": "SP",
    "latina": "LT",
    "lecce": "LE",
    "lecco": "LC",
    "livorno": "LI",
    "lodi": "LO",
    "lucca": "LU",
    "macerata": "MC",
    "mantova": "MN",
    "massa-carrara": "MS",
    "massa e carrara": "MS",
    "matera": "MT",
    "messina": "ME",
    "milano": "MI",
    "modena": "MO",
    "monza e della brianza": "MB",
    "monza e brianza": "MB",
    "napoli": "NA",
    "novara": "NO",
    "nuoro": "NU",
    "oristano": "OR",
    "padova": "PD",
    "palermo": "PA",
    "parma": "PR",
    "pavia": "PV",
    "perugia": "PG",
    "pesaro e urbino": "PU",
    "pescara": "PE",
    "piacenza": "PC",
    "pisa": "PI",
    "pistoia": "PT",
    "pordenone": "PN",
    "potenza": "PZ",
    "prato": "PO",
    "ragusa": "RG",
    "ravenna": "RA",
    "reggio calabria": "RC",
    "reggio di calabria": "RC",
    "reggio emilia": "RE",
    "reggio nell'emilia": "RE",
    "rieti": "RI",
    "rimini": "RN",
    "roma": "RM",
    "roma capitale": "RM",
    "rovigo": "RO",
    "salerno": "SA",
    "sassari": "SS",
    "savona": "SV",
    "siena": "SI",
    "siracusa": "SR",
    "sondrio": "SO",
    "sud sardegna": "SU",
    "taranto": "TA",
    "teramo": "TE",
    "terni": "TR",
    "torino": "TO",
    "trapani": "TP",
    "trento": "TN",
    "treviso": "TV",
    "trieste": "TS",
    "udine": "UD",
    "varese": "VA",
    "venezia": "VE",
    "verbano-cusio-ossola": "VB",
    "vercelli": "VC",
    "verona": "VR",
    "vibo valentia": "VV",
    "vicenza": "VI",
    "viterbo": "VT",
}

_PREFIXES = (
    "citta metropolitana di ",
    "libero consorzio comunale di ",
    "provincia autonoma di ",
    "provincia di ",
    "provincia del ",
    "provincia dell'",
    "province of ",
    "metropolitan city of ",
)


def normalize_admin_name(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    ascii_name = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    normalized = re.sub(r"\s+", " ", ascii_name.replace("’", "'")).strip().lower()
    for prefix in _PREFIXES:
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix):]
            break
    return normalized


def province_code(name: Optional[str], table: Mapping[str, str] = PROVINCE_CODES) -> Optional[str]:
    if not name:
        return None
    normalized = normalize_admin_name(name)
    if normalized in table:
        return table[normalized]
    # bilingual names such as "Bolzano - Bozen" or "Südtirol - Alto Adige"
    for part in re.split(r"\s*[/-]\s+|\s+-\s*", normalized):
        if part in table:
            return table[part]
    return None


def code_from_iso3166(value: Optional[str]) -> Optional[str]:
    """``"IT-MI"`` -> ``"MI"``; anything else without a subdivision part -> None."""
    if not value or "-" not in value:
        return None
    return value.split("-", 1)[1].upper() or None
