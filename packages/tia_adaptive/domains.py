import random
from enum import Enum
from typing import Dict, List, Optional


class Domain(str, Enum):
    """
    Topic domains covered by the interview.
    """
    DATA_STRUCTURES = "data_structures"
    ALGORITHMS = "algorithms"
    SYSTEM_DESIGN = "system_design"
    DATABASE = "database"
    NETWORKING = "networking"
    SECURITY = "security"


ALL_DOMAINS: List[Domain] = list(Domain)

# Successor domains, most preferred first. security cycles back to the start.
DOMAIN_PROGRESSION: Dict[Domain, List[Domain]] = {
    Domain.DATA_STRUCTURES: [Domain.ALGORITHMS, Domain.SYSTEM_DESIGN],
    Domain.ALGORITHMS: [Domain.SYSTEM_DESIGN, Domain.DATABASE],
    Domain.SYSTEM_DESIGN: [Domain.DATABASE, Domain.NETWORKING],
    Domain.DATABASE: [Domain.NETWORKING, Domain.SECURITY],
    Domain.NETWORKING: [Domain.SECURITY],
    Domain.SECURITY: [Domain.DATA_STRUCTURES],
}


def parse_domain(value) -> Optional[Domain]:
    """Return the Domain for value, or None when value is not a known domain."""
    try:
        return Domain(value)
    except ValueError:
        return None


def successor(domain: Domain) -> Domain:
    """First successor of domain in the progression graph."""
    successors = DOMAIN_PROGRESSION.get(Domain(domain), [])
    return successors[0] if successors else Domain(domain)


def random_domain(rng: random.Random, pool: Optional[List[Domain]] = None) -> Domain:
    pool = pool or ALL_DOMAINS
    return rng.choice(pool)


def display_name(domain: Domain) -> str:
    """'system_design' -> 'System Design'"""
    return " ".join(word.capitalize() for word in Domain(domain).value.split("_"))
