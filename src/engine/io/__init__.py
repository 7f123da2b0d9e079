"""
どこで: `engine.io` サブパッケージ（MIDI ファイル入力）。
何を: 標準 MIDI ファイルの解析と、声部ごとの 16 分音符量子化タイムライン（Frame 列）の抽出。
なぜ: 入力形式への依存（mido）を隔離し、変換/アニメーション層からは (N, 4) 配列だけを見せるため。
"""
