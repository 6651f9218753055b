"""
Matching engine for parents and doulas.

A doula and a parent are compatible when all of the following hold:
- same state (case-insensitive)
- at least one shared service category
- at least one financing type the doula accepts
- at least one shared language, checked only when the parent listed preferred languages

Only candidates with an active subscription are eligible. There is no scoring;
results keep the order of the candidate list. Drive distance and town are stored
on the profiles but are not part of the location rule yet.
"""
import logging
from typing import Iterable, Iterator, List, Optional
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.db.models.parent_profile import ParentProfile
from app.db.models.doula_profile import DoulaProfile

logger = logging.getLogger(__name__)


def has_overlap(first: Optional[Iterable], second: Optional[Iterable]) -> bool:
    """Check if two collections share at least one value."""
    return not set(first or []).isdisjoint(second or [])


def same_state(first: Optional[str], second: Optional[str]) -> bool:
    return (first or "").lower() == (second or "").lower()


def is_compatible(parent: ParentProfile, doula: DoulaProfile) -> bool:
    """
    Filter predicate shared by both matching directions.

    Subscription state is not checked here; see iter_doulas_for_parent and
    iter_parents_for_doula.
    """
    if not same_state(parent.state, doula.state):
        return False

    if not has_overlap(parent.service_categories, doula.service_categories):
        return False

    if not has_overlap(parent.financing_type, doula.payment_preferences):
        return False

    # No preference means any language is fine
    if parent.preferred_languages and not has_overlap(parent.preferred_languages, doula.spoken_languages):
        return False

    return True


def iter_doulas_for_parent(parent: ParentProfile, candidate_doulas: Iterable[DoulaProfile]) -> Iterator[DoulaProfile]:
    """Lazily yield subscribed doulas compatible with the parent, in candidate order."""
    for doula in candidate_doulas:
        if doula.subscription_active and is_compatible(parent, doula):
            yield doula


def iter_parents_for_doula(doula: DoulaProfile, candidate_parents: Iterable[ParentProfile]) -> Iterator[ParentProfile]:
    """Lazily yield subscribed parents compatible with the doula, in candidate order."""
    for parent in candidate_parents:
        if parent.subscription_active and is_compatible(parent, doula):
            yield parent


def match_doulas_for_parent(parent: ParentProfile, candidate_doulas: Iterable[DoulaProfile]) -> List[DoulaProfile]:
    return list(iter_doulas_for_parent(parent, candidate_doulas))


def match_parents_for_doula(doula: DoulaProfile, candidate_parents: Iterable[ParentProfile]) -> List[ParentProfile]:
    return list(iter_parents_for_doula(doula, candidate_parents))


def find_doulas_for_parent(db: Session, user_id: int) -> List[DoulaProfile]:
    """
    Load the parent's profile and return matching doulas.

    Args:
        db: Database session
        user_id: Parent's user ID

    Returns:
        Matching doula profiles (possibly empty)

    Raises:
        NotFoundError: if the user has no parent profile
    """
    parent = db.query(ParentProfile).filter(ParentProfile.user_id == user_id).first()
    if not parent:
        raise NotFoundError("Parent profile not found")

    candidates = (
        db.query(DoulaProfile)
        .filter(DoulaProfile.subscription_active.is_(True))
        .order_by(DoulaProfile.id)
        .all()
    )
    matches = match_doulas_for_parent(parent, candidates)

    logger.info(f"Matched doulas: parent_user_id={user_id}, candidates={len(candidates)}, matches={len(matches)}")
    return matches


def find_parents_for_doula(db: Session, user_id: int) -> List[ParentProfile]:
    """
    Load the doula's profile and return matching parents.

    Raises:
        NotFoundError: if the user has no doula profile
    """
    doula = db.query(DoulaProfile).filter(DoulaProfile.user_id == user_id).first()
    if not doula:
        raise NotFoundError("Doula profile not found")

    candidates = (
        db.query(ParentProfile)
        .filter(ParentProfile.subscription_active.is_(True))
        .order_by(ParentProfile.id)
        .all()
    )
    matches = match_parents_for_doula(doula, candidates)

    logger.info(f"Matched parents: doula_user_id={user_id}, candidates={len(candidates)}, matches={len(matches)}")
    return matches
