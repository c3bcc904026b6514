DISCLAIMER = (
    "Rates shown are estimates derived from the most recently loaded rate sheet. "
    "Loan-level price adjustments and payups are not yet applied; final pricing, "
    "eligibility and lock terms are subject to investor guidelines and underwriting."
)

# Key under which the extracted pricing model is persisted.
MODEL_KEY = "tpoPricingModel_v1"

PAR_PRICE = 100.0
BROKER_COMP_POINTS = 2.5

PROGRAM_LABELS = {
    "conventional": "Conventional",
    "fha": "FHA",
    "va": "VA",
    "usda": "USDA",
    "jumbo": "Jumbo",
}

# Programs priced off a separate grid above the conforming limit.
HIGH_BALANCE_PROGRAMS = {"conventional", "fha"}

TERM_LABELS = {
    "30yr": "30 Year Fixed",
    "20yr": "20 Year Fixed",
    "15yr": "15 Year Fixed",
    "10yr": "10 Year Fixed",
    "arm": "ARM",
}

# ARMs amortize over 30 years.
TERM_AMORTIZATION_YEARS = {"30yr": 30, "20yr": 20, "15yr": 15, "10yr": 10, "arm": 30}

LOAN_LIMITS = {
    1: {"conforming_limit": 832750.0, "high_balance_limit": 1249125.0},
    2: {"conforming_limit": 1066250.0, "high_balance_limit": 1599375.0},
    3: {"conforming_limit": 1288800.0, "high_balance_limit": 1933200.0},
    4: {"conforming_limit": 1601750.0, "high_balance_limit": 2402625.0},
}

OCCUPANCY_OPTIONS = {"primary": "Primary Residence", "second_home": "Second Home", "investment": "Investment"}
PURPOSE_OPTIONS = {"purchase": "Purchase", "rate_term": "Rate/Term Refinance", "cash_out": "Cash-Out Refinance"}
PROPERTY_TYPE_OPTIONS = {
    "sfr": "Single Family",
    "condo": "Condo",
    "townhome": "Townhome",
    "pud": "PUD",
    "2-4 unit": "2-4 Unit",
}
