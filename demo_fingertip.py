#!/usr/bin/env python3
"""
Fingertip デモ エントリーポイント

使用方法:
    # 指を広げた手（星形）の合成シーン
    python demo_fingertip.py --scene star

    # 握り拳（円盤）の合成シーン
    python demo_fingertip.py --scene disk --log-level DEBUG

    # 保存済み深度画像
    python demo_fingertip.py --depth-file depth.npy --hand 320 240 0.5
"""

import sys
import os

# プロジェクトルートをパスに追加
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

try:
    from fingertip.cli import main

except ImportError as e:
    print(f"エラー: 必要なモジュールをインポートできません")
    print(f"詳細: {e}")
    print("\n以下を確認してください:")
    print("1. 仮想環境がアクティベートされているか")
    print("2. パッケージがインストールされているか (pip install -e .)")
    sys.exit(1)


if __name__ == '__main__':
    sys.exit(main())
