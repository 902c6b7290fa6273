# crud/rewards.py
import logging
from typing import Callable, List
from sqlalchemy import func
from sqlalchemy.orm import Session
from models import Reward, RewardClaim
from crud.users import get_user_field

logger = logging.getLogger("rewards")


def get_active_rewards(db: Session, condition: str) -> List[Reward]:
    return (
        db.query(Reward)
        .filter(Reward.condition == condition, Reward.active.is_(True))
        .order_by(Reward.threshold.asc(), Reward.id.asc())
        .all()
    )


def claim_count(db: Session, reward_id: int, uid: int) -> int:
    return db.query(func.count(RewardClaim.id)).filter(
        RewardClaim.reward_id == reward_id,
        RewardClaim.uid == uid,
    ).scalar() or 0


def check_condition_and_reward_user(db: Session, uid: int, condition: str, method: Callable[[], object]) -> List[Reward]:
    """
    Run ``method`` (which bumps the user's counter for ``condition``) and then
    grant every active reward whose threshold the counter now reaches.
    A reward is granted at most ``claimable`` times per user.
    """
    method()
    value = get_user_field(db, uid, condition)
    granted = []
    for reward in get_active_rewards(db, condition):
        if value < reward.threshold:
            continue
        if claim_count(db, reward.id, uid) >= reward.claimable:
            continue
        db.add(RewardClaim(reward_id=reward.id, uid=uid))
        granted.append(reward)
    if granted:
        db.commit()
        logger.info("Granted %s reward(s) to uid %s for %s", len(granted), uid, condition)
    return granted
