#!/usr/bin/env python3
"""
Fingertip デモランナー

合成シーンまたは保存済み深度画像 (.npy) に対してパイプラインを実行し、
手ごとの状態・凸性・把持・指先をログ出力します。
"""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from fingertip import setup_logging, get_logger
from fingertip.config import PipelineConfig, load_config
from fingertip.data_types import FrameAnalysis, HandAnalysis, HandPoint
from fingertip.detection.pipeline import FingertipPipeline
from fingertip.input.synthetic import SCENES, SyntheticDepthCamera


@dataclass
class DemoConfiguration:
    """デモ実行設定"""
    scene: str = "star"
    depth_file: Optional[Path] = None
    hand: Optional[Tuple[float, float, float]] = None
    frames: int = 1
    config_file: Optional[Path] = None
    log_level: str = "INFO"


def create_argument_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(
        description="深度マップからの指先・把持検出デモ",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--scene', choices=list(SCENES), default='star',
                        help='合成シーン（--depth-file 指定時は無視）')
    parser.add_argument('--depth-file', type=Path, default=None,
                        help='uint16 深度画像 (.npy)')
    parser.add_argument('--hand', type=float, nargs=3, metavar=('U', 'V', 'Z'), default=None,
                        help='手の中心 (px, px, m)。指定時はゲーティングを行わない')
    parser.add_argument('--frames', type=int, default=1,
                        help='処理フレーム数')
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML設定ファイル')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO',
                        help='ログレベル')
    return parser


def parse_arguments_to_config(argv: Optional[Sequence[str]] = None) -> DemoConfiguration:
    """引数をデモ設定に変換"""
    args = create_argument_parser().parse_args(argv)
    return DemoConfiguration(
        scene=args.scene,
        depth_file=args.depth_file,
        hand=tuple(args.hand) if args.hand is not None else None,
        frames=max(1, args.frames),
        config_file=args.config,
        log_level=args.log_level
    )


class DemoRunner:
    """デモランナー"""

    def __init__(self, config: DemoConfiguration):
        self.config = config
        self.logger = get_logger(__name__)
        setup_logging(level=config.log_level, format_style="detailed")

    def run(self) -> int:
        """デモを実行"""
        try:
            pipeline_config = self._load_pipeline_config()
            setup_logging(level=self.config.log_level, format_style=pipeline_config.log_format_style)
            pipeline = FingertipPipeline(pipeline_config)

            if self.config.depth_file is not None:
                return self._run_depth_file(pipeline)
            return self._run_synthetic(pipeline)

        except KeyboardInterrupt:
            self.logger.info("Demo interrupted by user")
            return 0
        except Exception as e:
            self.logger.error(f"Demo execution error: {e}", exc_info=True)
            return 1

    def _load_pipeline_config(self) -> PipelineConfig:
        if self.config.config_file is not None and not self.config.config_file.exists():
            raise FileNotFoundError(f"Config file not found: {self.config.config_file}")
        return load_config(self.config.config_file)

    def _run_depth_file(self, pipeline: FingertipPipeline) -> int:
        """保存済み深度画像を処理"""
        if self.config.hand is None:
            self.logger.error("--hand U V Z is required with --depth-file")
            return 1

        depth_image = np.load(self.config.depth_file)
        if depth_image.ndim != 2:
            self.logger.error(f"Depth image must be 2-D, got shape {depth_image.shape}")
            return 1
        depth_image = depth_image.astype(np.uint16, copy=False)
        self.logger.info(f"Loaded depth image {depth_image.shape} from {self.config.depth_file}")

        hand_point = HandPoint(*self.config.hand)
        for _ in range(self.config.frames):
            self._log_hand(pipeline.analyze_hand(depth_image, hand_point))
        return 0

    def _run_synthetic(self, pipeline: FingertipPipeline) -> int:
        """合成シーンを処理"""
        self.logger.info(f"Running synthetic '{self.config.scene}' scene for {self.config.frames} frame(s)")

        with SyntheticDepthCamera(scene=self.config.scene) as camera:
            for _ in range(self.config.frames):
                frame = camera.get_frame()
                if self.config.hand is not None:
                    self._log_hand(pipeline.analyze_hand(frame.depth_image, HandPoint(*self.config.hand)))
                else:
                    self._log_frame(pipeline.process(frame, camera.get_skeletons()))

        stats = pipeline.get_performance_stats()
        self.logger.info(
            f"Done: {stats['total_frames']} frames, {stats['hands_analyzed']} hands, "
            f"status {stats['status_counts']}"
        )
        return 0

    def _log_frame(self, frame_result: FrameAnalysis) -> None:
        self.logger.info(
            f"Frame {frame_result.frame_number}: {len(frame_result.hands)} hand(s) analysed, "
            f"{len(frame_result.skipped)} skipped ({frame_result.processing_time_ms:.2f}ms)"
        )
        for skipped in frame_result.skipped:
            self.logger.info(
                f"  user {skipped.user_id} {skipped.handedness.value}: skipped ({skipped.reason.value})"
            )
        for hand in frame_result.hands:
            self._log_hand(hand)

    def _log_hand(self, hand: HandAnalysis) -> None:
        label = hand.handedness.value if hand.handedness is not None else "hand"
        if not hand.success:
            self.logger.info(f"  {label}: {hand.status.value}")
            return
        tips: List[Tuple[int, int]] = hand.fingertips
        self.logger.info(
            f"  {label}: convexity={hand.convexity:.3f} grasp={hand.grasp} "
            f"fingertips={len(tips)} {tips}"
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """エントリーポイント"""
    return DemoRunner(parse_arguments_to_config(argv)).run()


if __name__ == '__main__':
    raise SystemExit(main())
