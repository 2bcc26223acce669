from ..engine.domain import DomainSpec
from .courts import COURTS
from .microsites import MICROSITES
from .participants import PARTICIPANTS
from .reservations import RESERVATIONS
from .tournaments import TOURNAMENTS
from .users import USERS

DOMAINS: dict[str, DomainSpec] = {
    spec.name: spec for spec in (USERS, COURTS, RESERVATIONS, TOURNAMENTS, PARTICIPANTS, MICROSITES)
}


def get_domain(name: str) -> DomainSpec:
    try:
        return DOMAINS[name]
    except KeyError:
        raise KeyError(f"Unknown domain: {name}") from None


__all__ = ["COURTS", "DOMAINS", "MICROSITES", "PARTICIPANTS", "RESERVATIONS", "TOURNAMENTS", "USERS", "get_domain"]
