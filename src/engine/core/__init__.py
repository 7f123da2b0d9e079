"""
どこで: `engine.core` サブパッケージ。
何を: フレーム駆動（Tickable/FrameClock）と描画ウィンドウを提供。
なぜ: アニメーション状態と描画ループを疎結合に保ち、上位層（api/render）から再利用可能にするため。
"""
