"""Curated reference data shipped with the application.

Substitution lists and passport requirements reflect 2025 travel data and are
maintained by hand. Entries marked on arrival need a border process, an ETA or
an e-visa rather than nothing at all.
"""

from __future__ import annotations

from collections.abc import Mapping

from .exceptions import RuleTableConflictError
from .loader import (
    BlocDocument,
    CountryDocument,
    RuleTableDocument,
    SubstitutionDocument,
    VisaClassDocument,
)
from .models import AccessLevel, DirectRequirement

DEFAULT_RULE_TABLE_VERSION = "2025.1"

_COUNTRIES: tuple[tuple[str, str, str], ...] = (
    ("AL", "Albania", "Europe"),
    ("AD", "Andorra", "Europe"),
    ("AT", "Austria", "Europe"),
    ("BY", "Belarus", "Europe"),
    ("BE", "Belgium", "Europe"),
    ("BA", "Bosnia and Herzegovina", "Europe"),
    ("BG", "Bulgaria", "Europe"),
    ("HR", "Croatia", "Europe"),
    ("CY", "Cyprus", "Europe"),
    ("CZ", "Czech Republic", "Europe"),
    ("DK", "Denmark", "Europe"),
    ("EE", "Estonia", "Europe"),
    ("FI", "Finland", "Europe"),
    ("FR", "France", "Europe"),
    ("DE", "Germany", "Europe"),
    ("GR", "Greece", "Europe"),
    ("HU", "Hungary", "Europe"),
    ("IS", "Iceland", "Europe"),
    ("IE", "Ireland", "Europe"),
    ("IT", "Italy", "Europe"),
    ("XK", "Kosovo", "Europe"),
    ("LV", "Latvia", "Europe"),
    ("LI", "Liechtenstein", "Europe"),
    ("LT", "Lithuania", "Europe"),
    ("LU", "Luxembourg", "Europe"),
    ("MT", "Malta", "Europe"),
    ("MD", "Moldova", "Europe"),
    ("MC", "Monaco", "Europe"),
    ("ME", "Montenegro", "Europe"),
    ("NL", "Netherlands", "Europe"),
    ("MK", "North Macedonia", "Europe"),
    ("NO", "Norway", "Europe"),
    ("PL", "Poland", "Europe"),
    ("PT", "Portugal", "Europe"),
    ("RO", "Romania", "Europe"),
    ("RU", "Russia", "Europe"),
    ("SM", "San Marino", "Europe"),
    ("RS", "Serbia", "Europe"),
    ("SK", "Slovakia", "Europe"),
    ("SI", "Slovenia", "Europe"),
    ("ES", "Spain", "Europe"),
    ("SE", "Sweden", "Europe"),
    ("CH", "Switzerland", "Europe"),
    ("UA", "Ukraine", "Europe"),
    ("GB", "United Kingdom", "Europe"),
    ("VA", "Vatican City", "Europe"),
    ("TR", "Turkey", "Europe"),
    ("AF", "Afghanistan", "Asia"),
    ("AM", "Armenia", "Asia"),
    ("AZ", "Azerbaijan", "Asia"),
    ("BH", "Bahrain", "Asia"),
    ("BD", "Bangladesh", "Asia"),
    ("BT", "Bhutan", "Asia"),
    ("BN", "Brunei", "Asia"),
    ("KH", "Cambodia", "Asia"),
    ("CN", "China", "Asia"),
    ("GE", "Georgia", "Asia"),
    ("HK", "Hong Kong", "Asia"),
    ("IN", "India", "Asia"),
    ("ID", "Indonesia", "Asia"),
    ("IR", "Iran", "Asia"),
    ("IQ", "Iraq", "Asia"),
    ("IL", "Israel", "Asia"),
    ("JP", "Japan", "Asia"),
    ("JO", "Jordan", "Asia"),
    ("KZ", "Kazakhstan", "Asia"),
    ("KW", "Kuwait", "Asia"),
    ("KG", "Kyrgyzstan", "Asia"),
    ("LA", "Laos", "Asia"),
    ("LB", "Lebanon", "Asia"),
    ("MO", "Macau", "Asia"),
    ("MY", "Malaysia", "Asia"),
    ("MV", "Maldives", "Asia"),
    ("MN", "Mongolia", "Asia"),
    ("MM", "Myanmar", "Asia"),
    ("NP", "Nepal", "Asia"),
    ("KP", "North Korea", "Asia"),
    ("OM", "Oman", "Asia"),
    ("PK", "Pakistan", "Asia"),
    ("PS", "Palestine", "Asia"),
    ("PH", "Philippines", "Asia"),
    ("QA", "Qatar", "Asia"),
    ("SA", "Saudi Arabia", "Asia"),
    ("SG", "Singapore", "Asia"),
    ("KR", "South Korea", "Asia"),
    ("LK", "Sri Lanka", "Asia"),
    ("SY", "Syria", "Asia"),
    ("TW", "Taiwan", "Asia"),
    ("TJ", "Tajikistan", "Asia"),
    ("TH", "Thailand", "Asia"),
    ("TL", "Timor-Leste", "Asia"),
    ("TM", "Turkmenistan", "Asia"),
    ("AE", "United Arab Emirates", "Asia"),
    ("UZ", "Uzbekistan", "Asia"),
    ("VN", "Vietnam", "Asia"),
    ("YE", "Yemen", "Asia"),
    ("DZ", "Algeria", "Africa"),
    ("AO", "Angola", "Africa"),
    ("BJ", "Benin", "Africa"),
    ("BW", "Botswana", "Africa"),
    ("BF", "Burkina Faso", "Africa"),
    ("BI", "Burundi", "Africa"),
    ("CV", "Cape Verde", "Africa"),
    ("CM", "Cameroon", "Africa"),
    ("CF", "Central African Republic", "Africa"),
    ("TD", "Chad", "Africa"),
    ("KM", "Comoros", "Africa"),
    ("CG", "Congo", "Africa"),
    ("CD", "DR Congo", "Africa"),
    ("CI", "Côte d'Ivoire", "Africa"),
    ("DJ", "Djibouti", "Africa"),
    ("EG", "Egypt", "Africa"),
    ("GQ", "Equatorial Guinea", "Africa"),
    ("ER", "Eritrea", "Africa"),
    ("SZ", "Eswatini", "Africa"),
    ("ET", "Ethiopia", "Africa"),
    ("GA", "Gabon", "Africa"),
    ("GM", "Gambia", "Africa"),
    ("GH", "Ghana", "Africa"),
    ("GN", "Guinea", "Africa"),
    ("GW", "Guinea-Bissau", "Africa"),
    ("KE", "Kenya", "Africa"),
    ("LS", "Lesotho", "Africa"),
    ("LR", "Liberia", "Africa"),
    ("LY", "Libya", "Africa"),
    ("MG", "Madagascar", "Africa"),
    ("MW", "Malawi", "Africa"),
    ("ML", "Mali", "Africa"),
    ("MR", "Mauritania", "Africa"),
    ("MU", "Mauritius", "Africa"),
    ("MA", "Morocco", "Africa"),
    ("MZ", "Mozambique", "Africa"),
    ("NA", "Namibia", "Africa"),
    ("NE", "Niger", "Africa"),
    ("NG", "Nigeria", "Africa"),
    ("RW", "Rwanda", "Africa"),
    ("ST", "São Tomé and Príncipe", "Africa"),
    ("SN", "Senegal", "Africa"),
    ("SC", "Seychelles", "Africa"),
    ("SL", "Sierra Leone", "Africa"),
    ("SO", "Somalia", "Africa"),
    ("ZA", "South Africa", "Africa"),
    ("SS", "South Sudan", "Africa"),
    ("SD", "Sudan", "Africa"),
    ("TZ", "Tanzania", "Africa"),
    ("TG", "Togo", "Africa"),
    ("TN", "Tunisia", "Africa"),
    ("UG", "Uganda", "Africa"),
    ("ZM", "Zambia", "Africa"),
    ("ZW", "Zimbabwe", "Africa"),
    ("AQ", "Antarctica", "Antarctica"),
    ("BZ", "Belize", "North America"),
    ("CA", "Canada", "North America"),
    ("CR", "Costa Rica", "North America"),
    ("CU", "Cuba", "North America"),
    ("DM", "Dominica", "North America"),
    ("DO", "Dominican Republic", "North America"),
    ("SV", "El Salvador", "North America"),
    ("GD", "Grenada", "North America"),
    ("GT", "Guatemala", "North America"),
    ("HT", "Haiti", "North America"),
    ("HN", "Honduras", "North America"),
    ("JM", "Jamaica", "North America"),
    ("MX", "Mexico", "North America"),
    ("NI", "Nicaragua", "North America"),
    ("PA", "Panama", "North America"),
    ("KN", "Saint Kitts and Nevis", "North America"),
    ("LC", "Saint Lucia", "North America"),
    ("VC", "Saint Vincent and the Grenadines", "North America"),
    ("TT", "Trinidad and Tobago", "North America"),
    ("US", "United States", "North America"),
    ("AR", "Argentina", "South America"),
    ("BO", "Bolivia", "South America"),
    ("BR", "Brazil", "South America"),
    ("CL", "Chile", "South America"),
    ("CO", "Colombia", "South America"),
    ("EC", "Ecuador", "South America"),
    ("GY", "Guyana", "South America"),
    ("PY", "Paraguay", "South America"),
    ("PE", "Peru", "South America"),
    ("SR", "Suriname", "South America"),
    ("UY", "Uruguay", "South America"),
    ("VE", "Venezuela", "South America"),
    ("AU", "Australia", "Oceania"),
    ("FJ", "Fiji", "Oceania"),
    ("KI", "Kiribati", "Oceania"),
    ("MH", "Marshall Islands", "Oceania"),
    ("FM", "Micronesia", "Oceania"),
    ("NR", "Nauru", "Oceania"),
    ("NZ", "New Zealand", "Oceania"),
    ("PW", "Palau", "Oceania"),
    ("PG", "Papua New Guinea", "Oceania"),
    ("WS", "Samoa", "Oceania"),
    ("SB", "Solomon Islands", "Oceania"),
    ("TO", "Tonga", "Oceania"),
    ("TV", "Tuvalu", "Oceania"),
    ("VU", "Vanuatu", "Oceania"),
    # Territories that appear only in substitution lists
    ("AG", "Antigua and Barbuda", "North America"),
    ("AI", "Anguilla", "North America"),
    ("AW", "Aruba", "North America"),
    ("BM", "Bermuda", "North America"),
    ("BQ", "Caribbean Netherlands", "North America"),
    ("BS", "Bahamas", "North America"),
    ("CW", "Curaçao", "North America"),
    ("GI", "Gibraltar", "Europe"),
    ("KY", "Cayman Islands", "North America"),
    ("MF", "Saint Martin", "North America"),
    ("PR", "Puerto Rico", "North America"),
    ("TC", "Turks and Caicos Islands", "North America"),
    ("VG", "British Virgin Islands", "North America"),
    ("VI", "U.S. Virgin Islands", "North America"),
)

SCHENGEN_COUNTRIES: tuple[str, ...] = (
    "AT", "BE", "BG", "HR", "CZ", "DK", "EE", "FI", "FR", "DE", "GR", "HU", "IS",
    "IT", "LV", "LI", "LT", "LU", "MT", "NL", "NO", "PL", "PT", "RO", "SK", "SI",
    "ES", "SE", "CH",
)

_FREE = AccessLevel.VISA_FREE
_VOA = AccessLevel.ON_ARRIVAL

_US_VISA_SUBSTITUTIONS: tuple[tuple[str, AccessLevel], ...] = (
    # Americas / Caribbean
    ("MX", _FREE), ("CR", _FREE), ("DO", _FREE), ("PA", _FREE), ("BZ", _FREE),
    ("GT", _FREE), ("HN", _FREE), ("NI", _FREE), ("CO", _FREE), ("BS", _FREE),
    ("BM", _FREE), ("AW", _FREE), ("AI", _FREE), ("BQ", _FREE), ("CW", _FREE),
    ("MF", _FREE), ("JM", _FREE), ("TC", _FREE), ("AG", _FREE), ("PR", _FREE),
    ("VI", _FREE),
    # Europe
    ("GE", _FREE), ("RS", _FREE), ("ME", _FREE), ("AL", _FREE), ("MK", _FREE), ("BA", _FREE),
    # Asia / Middle East
    ("PH", _FREE),  # 7 days
    ("KR", _VOA),  # K-ETA
    ("TW", _VOA),  # travel authorisation
    ("QA", _VOA),  # ETA
    ("SA", _VOA),  # e-visa
    # Africa
    ("ST", _FREE),
)

_SCHENGEN_VISA_SUBSTITUTIONS: tuple[tuple[str, AccessLevel], ...] = (
    # Non-Schengen Europe
    ("AL", _FREE), ("BA", _FREE), ("MK", _FREE), ("ME", _FREE), ("RS", _FREE),
    ("CY", _FREE), ("XK", _FREE), ("BY", _FREE), ("GE", _FREE), ("MD", _FREE),
    ("TR", _VOA),
    # Americas
    ("MX", _FREE), ("PA", _FREE), ("DO", _FREE), ("CO", _FREE), ("PE", _FREE),
    # Middle East
    ("SA", _VOA), ("QA", _VOA),
)

_UK_VISA_SUBSTITUTIONS: tuple[tuple[str, AccessLevel], ...] = (
    ("IE", _FREE),  # British-Irish visa scheme
    ("AL", _FREE), ("BS", _FREE), ("BY", _FREE), ("CU", _FREE), ("GE", _FREE),
    ("GI", _FREE), ("MX", _FREE), ("ME", _FREE), ("MK", _FREE), ("OM", _FREE),
    ("PE", _FREE), ("RS", _FREE), ("SG", _FREE),
    ("TR", _VOA),
    ("BM", _FREE), ("TC", _FREE), ("KY", _FREE), ("VG", _FREE), ("DO", _FREE),
    ("PA", _FREE),
)

_CANADA_VISA_SUBSTITUTIONS: tuple[tuple[str, AccessLevel], ...] = (
    ("MX", _FREE), ("CR", _FREE), ("PA", _FREE), ("DO", _FREE), ("MK", _FREE),
    ("KR", _VOA), ("TW", _VOA),
    ("PH", _FREE), ("AL", _FREE), ("BA", _FREE), ("GE", _FREE), ("ST", _FREE),
    ("MA", _FREE),
)

# passport -> (visa free, on arrival, e-visa, visa required)
_PASSPORT_REQUIREMENTS: dict[str, tuple[str, str, str, str]] = {
    "DE": (
        "AT BE BG HR CY CZ DK EE FI FR GR HU IE IT LV LT LU MT NL PL PT RO SK SI ES SE US CA "
        "JP KR SG MY TH ID PH GB NO CH IS BR AR CL MX CO PE ZA AE QA TR",
        "EG JO KE TZ ET MD GE AM",
        "IN VN KH MM LK OM BH KW SA AU NZ",
        "CN RU IR IQ SY AF PK BD NG GH",
    ),
    "US": (
        "CA MX GB DE FR IT ES PT NL BE AT CH SE NO DK FI IE JP KR SG AU NZ IL CL AR CO PE CR PA "
        "ZA AE QA BH GR HR CZ PL HU SK SI EE LV LT MT CY BG RO",
        "EG JO KE TZ ET BT MV NP ID TH MY PH KH LA",
        "IN VN MM LK OM KW SA TR GE AM AZ BR",
        "CN RU IR IQ SY AF PK BD NG",
    ),
    "GB": (
        "DE FR IT ES PT NL BE AT CH SE NO DK FI IE US CA AU NZ JP KR SG MY TH IL CL BR AR CO PE "
        "MX ZA AE QA BH GR HR CZ PL HU SK SI EE LV LT MT CY BG RO TR",
        "EG JO KE TZ ET BT MV NP ID PH KH LA",
        "IN VN MM LK OM KW SA GE AM AZ",
        "CN RU IR IQ SY AF PK BD NG",
    ),
    "JP": (
        "US CA GB DE FR IT ES PT NL BE AT CH SE NO DK FI IE AU NZ KR SG MY TH ID PH IL CL BR AR "
        "CO PE MX ZA AE QA BH TR GR HR CZ PL HU SK SI EE LV LT MT CY BG RO",
        "EG JO KE TZ ET BT MV NP KH LA",
        "IN VN MM LK OM KW SA GE AM AZ",
        "CN RU IR IQ SY AF PK BD NG",
    ),
    "XK": (
        "AL ME MK RS TR BA",
        "JO MV",
        "GE AZ AM",
        "DE FR IT ES GB US CA AU NZ JP KR SG MY TH ID PH CN RU IN BR AR MX ZA AE QA SA",
    ),
    "AL": (
        "ME MK RS BA XK TR GE AZ MD UA",
        "EG JO MV ID",
        "IN VN AU",
        "DE FR IT ES GB US CA JP KR SG CN RU BR AR MX ZA AE QA SA",
    ),
    "IN": (
        "NP BT MV MU FJ JM TT",
        "TH ID LA KH JO EG KE TZ ET MW ZM ZW MG",
        "VN MM LK GE AZ AM TR AE OM BH",
        "DE FR IT ES GB US CA AU NZ JP KR SG MY CN RU BR AR MX ZA QA SA",
    ),
    "CN": (
        "RS BA AL ME MK BE BY AE QA MU FJ TH SG MY ID",
        "EG JO KE TZ ET KH LA NP MV",
        "IN VN MM LK GE AZ AM TR",
        "DE FR IT ES GB US CA AU NZ JP KR BR AR MX ZA SA",
    ),
    "RU": (
        "RS BA ME MK AL TR GE AZ AM BY KZ KG TJ UZ MD CU VE AR BR TH ID MY PH VN",
        "EG JO KE TZ ET KH LA NP MV",
        "IN LK OM BH SA",
        "DE FR IT ES GB US CA AU NZ JP KR SG CN MX ZA AE QA",
    ),
}

_REQUIREMENT_COLUMNS = (
    DirectRequirement.VISA_FREE,
    DirectRequirement.ON_ARRIVAL,
    DirectRequirement.E_VISA,
    DirectRequirement.VISA_REQUIRED,
)


def _substitutions(entries: tuple[tuple[str, AccessLevel], ...]) -> list[SubstitutionDocument]:
    return [SubstitutionDocument(country_code=code, access=access) for code, access in entries]


def _direct_requirements(
    source: Mapping[str, tuple[str, ...]] = _PASSPORT_REQUIREMENTS,
) -> dict[str, dict[str, DirectRequirement]]:
    table: dict[str, dict[str, DirectRequirement]] = {}
    conflicts: list[str] = []
    for passport, columns in source.items():
        rows: dict[str, DirectRequirement] = {}
        for requirement, codes in zip(_REQUIREMENT_COLUMNS, columns):
            for code in codes.split():
                if code in rows:
                    conflicts.append(f"{passport}->{code} listed as both {rows[code].value} and {requirement.value}")
                    continue
                rows[code] = requirement
        table[passport] = rows
    if conflicts:
        raise RuleTableConflictError(conflicts)
    return table


def default_rule_table_document() -> RuleTableDocument:
    return RuleTableDocument(
        version=DEFAULT_RULE_TABLE_VERSION,
        countries=[CountryDocument(code=code, name=name, continent=continent) for code, name, continent in _COUNTRIES],
        blocs=[
            BlocDocument(
                bloc_id="SCHENGEN",
                name="Schengen Area",
                members=list(SCHENGEN_COUNTRIES),
                mutual_open=True,
            )
        ],
        visa_classes=[
            VisaClassDocument(
                visa_class_id="US_VISA",
                label="United States",
                flag="🇺🇸",
                description="Valid multiple-entry US Visa",
                issuers=["US"],
                substitutions=_substitutions(_US_VISA_SUBSTITUTIONS),
            ),
            VisaClassDocument(
                visa_class_id="SCHENGEN_VISA",
                label="Schengen (France)",
                flag="🇫🇷",
                description="Valid multiple-entry Schengen Visa",
                issuers=list(SCHENGEN_COUNTRIES),
                substitutions=_substitutions(_SCHENGEN_VISA_SUBSTITUTIONS),
            ),
            VisaClassDocument(
                visa_class_id="UK_VISA",
                label="United Kingdom",
                flag="🇬🇧",
                description="Valid UK Visa",
                issuers=["GB"],
                substitutions=_substitutions(_UK_VISA_SUBSTITUTIONS),
            ),
            VisaClassDocument(
                visa_class_id="CANADA_VISA",
                label="Canada",
                flag="🇨🇦",
                description="Valid Canada Visa",
                issuers=["CA"],
                substitutions=_substitutions(_CANADA_VISA_SUBSTITUTIONS),
            ),
            VisaClassDocument(
                visa_class_id="AUSTRALIA_VISA",
                label="Australia",
                flag="🇦🇺",
                description="Valid Australian Visa",
                issuers=["AU"],
            ),
        ],
        direct_requirements=_direct_requirements(),
    )
