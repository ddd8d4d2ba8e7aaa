"""
Shared sector taxonomy.

Founders pick exactly one sector, VCs pick a non-empty subset. Matching
compares these strings exactly, so entries must never be renamed in place.
"""

SECTORS: tuple[str, ...] = (
    "B2B SaaS",
    "Fintech",
    "Consumer (B2C)",
    "Marketplace",
    "Healthtech & Digital Health",
    "BioTech & Life Sciences",
    "Deep Tech & Frontier",
    "Artificial Intelligence (AI) & ML",
    "Crypto & Web3",
    "Climate & CleanTech",
    "Proptech",
    "EdTech",
    "E-commerce & DTC",
    "Hardware & Robotics",
    "Cybersecurity",
    "DevOps & Developer Tools",
    "Gaming & Interactive Media",
    "Mobility & Logistics",
    "LegalTech",
    "InsurTech",
    "AgTech",
    "SpaceTech",
    "GovTech",
    "Industrial & Manufacturing",
    "Social & Community",
)

SECTOR_SET = frozenset(SECTORS)

SLUG_PATTERN = r"^[a-z0-9-]+$"


def is_known_sector(value: str) -> bool:
    return value in SECTOR_SET

# Amount columns are 32-bit integers
MAX_AMOUNT = 2_147_483_647
