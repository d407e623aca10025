"""Offline UK postcode area table.

Maps outward-code prefixes to a representative post town and county. Used
when postcodes.io is unreachable and for back-filling city/county on records
that only carry a postcode. Coarse by nature: a prefix names an area, not a
street.
"""

from app.schemas.address import PostcodeArea

_LONDON = ("London", "Greater London")

POSTCODE_AREAS: dict[str, tuple[str, str]] = {
    # London
    "E": _LONDON,
    "EC": _LONDON,
    "N": _LONDON,
    "NW": _LONDON,
    "SE": _LONDON,
    "SW": _LONDON,
    "W": _LONDON,
    "WC": _LONDON,
    "BR": ("Bromley", "Greater London"),
    "CR": ("Croydon", "Greater London"),
    "EN": ("Enfield", "Greater London"),
    "HA": ("Harrow", "Greater London"),
    "IG": ("Ilford", "Greater London"),
    "RM": ("Romford", "Greater London"),
    "TW": ("Twickenham", "Greater London"),
    "UB": ("Uxbridge", "Greater London"),
    # England
    "AL": ("St Albans", "Hertfordshire"),
    "B": ("Birmingham", "West Midlands"),
    "BA": ("Bath", "Somerset"),
    "BB": ("Blackburn", "Lancashire"),
    "BD": ("Bradford", "West Yorkshire"),
    "BH": ("Bournemouth", "Dorset"),
    "BL": ("Bolton", "Greater Manchester"),
    "BN": ("Brighton", "East Sussex"),
    "BS": ("Bristol", "Bristol"),
    "CA": ("Carlisle", "Cumbria"),
    "CB": ("Cambridge", "Cambridgeshire"),
    "CH": ("Chester", "Cheshire"),
    "CM": ("Chelmsford", "Essex"),
    "CO": ("Colchester", "Essex"),
    "CT": ("Canterbury", "Kent"),
    "CV": ("Coventry", "West Midlands"),
    "CW": ("Crewe", "Cheshire"),
    "DA": ("Dartford", "Kent"),
    "DE": ("Derby", "Derbyshire"),
    "DH": ("Durham", "County Durham"),
    "DL": ("Darlington", "County Durham"),
    "DN": ("Doncaster", "South Yorkshire"),
    "EX": ("Exeter", "Devon"),
    "FY": ("Blackpool", "Lancashire"),
    "GL": ("Gloucester", "Gloucestershire"),
    "GL5": ("Cheltenham", "Gloucestershire"),
    "GU": ("Guildford", "Surrey"),
    "HD": ("Huddersfield", "West Yorkshire"),
    "HR": ("Hereford", "Herefordshire"),
    "HU": ("Hull", "East Yorkshire"),
    "HX": ("Halifax", "West Yorkshire"),
    "IP": ("Ipswich", "Suffolk"),
    "KT": ("Kingston upon Thames", "Surrey"),
    "L": ("Liverpool", "Merseyside"),
    "LA": ("Lancaster", "Lancashire"),
    "LE": ("Leicester", "Leicestershire"),
    "LN": ("Lincoln", "Lincolnshire"),
    "LS": ("Leeds", "West Yorkshire"),
    "LU": ("Luton", "Bedfordshire"),
    "M": ("Manchester", "Greater Manchester"),
    "ME": ("Maidstone", "Kent"),
    "MK": ("Milton Keynes", "Buckinghamshire"),
    "NE": ("Newcastle", "Tyne and Wear"),
    "NG": ("Nottingham", "Nottinghamshire"),
    "NN": ("Northampton", "Northamptonshire"),
    "NR": ("Norwich", "Norfolk"),
    "OL": ("Oldham", "Greater Manchester"),
    "OX": ("Oxford", "Oxfordshire"),
    "PE": ("Peterborough", "Cambridgeshire"),
    "PL": ("Plymouth", "Devon"),
    "PO": ("Portsmouth", "Hampshire"),
    "PR": ("Preston", "Lancashire"),
    "RG": ("Reading", "Berkshire"),
    "S": ("Sheffield", "South Yorkshire"),
    "S4": ("Chesterfield", "Derbyshire"),
    "S6": ("Rotherham", "South Yorkshire"),
    "S7": ("Barnsley", "South Yorkshire"),
    "SG": ("Stevenage", "Hertfordshire"),
    "SK": ("Stockport", "Greater Manchester"),
    "SL": ("Slough", "Berkshire"),
    "SO": ("Southampton", "Hampshire"),
    "SR": ("Sunderland", "Tyne and Wear"),
    "SS": ("Southend-on-Sea", "Essex"),
    "ST": ("Stoke-on-Trent", "Staffordshire"),
    "SY": ("Shrewsbury", "Shropshire"),
    "TA": ("Taunton", "Somerset"),
    "TF": ("Telford", "Shropshire"),
    "TQ": ("Torquay", "Devon"),
    "TR": ("Truro", "Cornwall"),
    "TS": ("Middlesbrough", "North Yorkshire"),
    "WA": ("Warrington", "Cheshire"),
    "WD": ("Watford", "Hertfordshire"),
    "WF": ("Wakefield", "West Yorkshire"),
    "WN": ("Wigan", "Greater Manchester"),
    "WR": ("Worcester", "Worcestershire"),
    "YO": ("York", "North Yorkshire"),
    # Scotland
    "AB": ("Aberdeen", "Aberdeenshire"),
    "DD": ("Dundee", "Angus"),
    "DG": ("Dumfries", "Dumfriesshire"),
    "EH": ("Edinburgh", "Midlothian"),
    "FK": ("Stirling", "Stirlingshire"),
    "G": ("Glasgow", "Lanarkshire"),
    "IV": ("Inverness", "Highland"),
    "KA": ("Kilmarnock", "Ayrshire"),
    "KY": ("Kirkcaldy", "Fife"),
    "ML": ("Motherwell", "Lanarkshire"),
    "PA": ("Paisley", "Renfrewshire"),
    "PH": ("Perth", "Perthshire"),
    # Wales
    "CF": ("Cardiff", "South Glamorgan"),
    "LL": ("Wrexham", "Clwyd"),
    "LL5": ("Bangor", "Gwynedd"),
    "NP": ("Newport", "Gwent"),
    "SA": ("Swansea", "West Glamorgan"),
    # Northern Ireland
    "BT": ("Belfast", "County Antrim"),
}


def lookup_postcode_area(postcode: str) -> PostcodeArea:
    """Most specific area for ``postcode``: tries 3-, then 2-, then 1-character prefixes."""
    compact = "".join(postcode.split()).upper()
    if len(compact) < 2:
        return PostcodeArea()

    for size in (3, 2, 1):
        area = POSTCODE_AREAS.get(compact[:size])
        if area:
            city, county = area
            return PostcodeArea(city=city, county=county)

    return PostcodeArea()
