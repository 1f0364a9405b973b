#!/usr/bin/env python3
"""
手ゲーティング
骨格トラッカーの関節情報から、解析対象とする手を選別する
"""

from typing import List, Tuple, Union

from fingertip import get_logger
from fingertip.config import GatingConfig
from fingertip.data_types import (
    HandednessType, HandPoint, SkipReason, SkippedHand, UserSkeleton
)

logger = get_logger(__name__)

# 右手 → 左手の順に評価
HAND_ORDER = (HandednessType.RIGHT, HandednessType.LEFT)


def check_hand(
    skeleton: UserSkeleton,
    handedness: HandednessType,
    config: GatingConfig
) -> Union[HandPoint, SkipReason]:
    """
    1つの手を解析すべきか判定

    Returns:
        解析対象なら HandPoint、そうでなければスキップ理由
    """
    if skeleton.torso.confidence < config.required_confidence:
        return SkipReason.TORSO_NOT_TRACKED

    joint = skeleton.hand(handedness)
    if joint is None or joint.confidence < config.required_confidence:
        return SkipReason.LOW_CONFIDENCE

    hand = joint.point
    torso = skeleton.torso.point

    # 手をセンサー側に伸ばしている
    if config.require_extension and not hand.z < torso.z - config.min_hand_extension:
        return SkipReason.NOT_EXTENDED

    # 手を胴体より上に挙げている（画像座標は下向き）
    if config.require_raised_hand and not hand.v < torso.v:
        return SkipReason.NOT_RAISED

    return hand


def select_hands(
    skeletons: List[UserSkeleton],
    config: GatingConfig
) -> Tuple[List[Tuple[int, HandednessType, HandPoint]], List[SkippedHand]]:
    """
    全ユーザー・全ての手をゲーティング

    Returns:
        (解析対象 [(user_id, handedness, hand_point)], スキップした手)
    """
    accepted: List[Tuple[int, HandednessType, HandPoint]] = []
    skipped: List[SkippedHand] = []

    for skeleton in skeletons:
        for handedness in HAND_ORDER:
            decision = check_hand(skeleton, handedness, config)
            if isinstance(decision, SkipReason):
                skipped.append(SkippedHand(skeleton.user_id, handedness, decision))
                logger.debug(
                    f"User {skeleton.user_id} {handedness.value} hand skipped: {decision.value}"
                )
            else:
                accepted.append((skeleton.user_id, handedness, decision))

    return accepted, skipped
